from design_studio.schemas.business import BusinessInfo, BusinessRequirements
from design_studio.schemas.customization import (
    AnimationProfile,
    ColorPalette,
    CustomizationResult,
    FontSystem,
    LayoutProfile,
    PhotoConfiguration,
    SpacingProfile,
)
from design_studio.schemas.missions import (
    BusinessMission,
    ControlCommand,
    Deliverables,
    DesignMissionResult,
    GeneratedAssets,
    MissionEvent,
    MissionRecordOut,
    MissionStatusReport,
    SubmissionAccepted,
    SubmissionOutcome,
    SubmissionReady,
)
from design_studio.schemas.optimization import ConversionOptimization, OptimizationReport
from design_studio.schemas.selection import SmartSelectionResult, TemplateScore, TemplateSelectionRequest
from design_studio.schemas.templates import Template
