"""POST /api/classify and /api/device: single-node heuristics."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from flowsight.dependencies import get_detection_config
from flowsight.engine.config import DetectionConfig
from flowsight.engine.detectors.component import ComponentClassifier
from flowsight.engine.detectors.device import detect_device
from flowsight.models.requests import ClassifyRequest, DeviceRequest
from flowsight.models.responses import ClassifyResponse, DeviceResponse

router = APIRouter()


@router.post("/classify", response_model=ClassifyResponse)
async def classify(
    req: ClassifyRequest,
    config: DetectionConfig = Depends(get_detection_config),
) -> ClassifyResponse:
    result = ComponentClassifier(config).classify(req.node)
    return ClassifyResponse(
        semantic_type=result.semantic_type,
        confidence=round(result.confidence, 2),
        detected=result.detected,
        reasons=[r for t in result.detected for r in result.reasons[t]],
        heading_level=result.heading_level,
    )


@router.post("/device", response_model=DeviceResponse)
async def device(
    req: DeviceRequest,
    config: DetectionConfig = Depends(get_detection_config),
) -> DeviceResponse:
    det = detect_device(req.width, req.height, config)
    return DeviceResponse(
        device_type=det.device_type.value,
        orientation=det.orientation,
        confidence=round(det.confidence, 2),
        width=det.width,
        height=det.height,
        aspect_ratio=det.aspect_ratio,
        pixel_density=det.pixel_density,
        category=det.category,
        recommendations=det.recommendations,
    )
