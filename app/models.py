from typing import Any, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, StrictStr

from app.config import MIN_IMAGE_LENGTH

MODE_PLANT = "plant"
MODE_DISEASE = "disease"


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    image: StrictStr = Field(min_length=MIN_IMAGE_LENGTH)  # base64 or data: URL
    mode: Optional[Any] = None  # anything other than "plant" means disease detection
    mime_type: Optional[StrictStr] = None

    @property
    def analysis_mode(self) -> str:
        return MODE_PLANT if self.mode == MODE_PLANT else MODE_DISEASE


class CareInstruction(BaseModel):
    title: str
    description: str


class PlantIdentificationResult(BaseModel):
    plant_name: str
    scientific_name: str
    description: str
    care_instructions: Union[str, List[CareInstruction]]
    confidence: float


class DiseaseDetectionResult(BaseModel):
    is_healthy: bool
    disease_name: Optional[str] = ""
    description: str
    treatments: List[str] = []
    confidence: float


class ErrorResponse(BaseModel):
    error: str
    message: str
    stack: Optional[str] = None


RESULT_MODELS = {
    MODE_PLANT: PlantIdentificationResult,
    MODE_DISEASE: DiseaseDetectionResult,
}


def requested_keys(mode: str) -> List[str]:
    """Keys the model is asked to return for ``mode`` (confidence is handled separately)."""
    return [name for name in RESULT_MODELS[mode].model_fields if name != "confidence"]
