from enum import Enum

from pydantic import BaseModel


class StressLevel(str, Enum):
    low = "low"
    moderate = "moderate"
    high = "high"
    very_high = "very_high"


class SleepQuality(str, Enum):
    poor = "poor"
    good = "good"
    excellent = "excellent"


class WaterIntake(str, Enum):
    insufficient = "insufficient"
    moderate = "moderate"
    athlete = "athlete"


class HealthQuestionnaire(BaseModel):
    injuries: str = ""
    allergies: str = ""
    stress_level: StressLevel = StressLevel.moderate
    sleep_quality: SleepQuality = SleepQuality.good
    water_intake: WaterIntake = WaterIntake.moderate
