"""
서비스 레이어
관찰 키워드 → 입력 조립 → 프롬프트 → 생성 → 검증 파이프라인
"""
from neis_record.services.keyword_catalog import (
    KeywordCatalog,
    get_keyword_catalog
)
from neis_record.services.observation_aggregator import ObservationAggregator
from neis_record.services.input_assembler import (
    InputAssembler,
    resolve_subject
)
from neis_record.services.prompt_composer import (
    PromptComposer,
    analyze_survey_response
)
from neis_record.services.generation_client import (
    GenerationClient,
    GeminiClient,
    GenerationConfig,
    resolve_api_key,
    get_client_factory
)
from neis_record.services.compliance_validator import (
    ComplianceValidator,
    ViolationKind
)
from neis_record.services.batch_orchestrator import (
    BatchOrchestrator,
    BatchRun,
    FixedDelayThrottle,
    get_batch_throttle
)
from neis_record.services.record_export import (
    build_export_text,
    export_filename
)

__all__ = [
    # Observation keywords
    "KeywordCatalog",
    "get_keyword_catalog",
    "ObservationAggregator",

    # Pipeline
    "InputAssembler",
    "resolve_subject",
    "PromptComposer",
    "analyze_survey_response",
    "ComplianceValidator",
    "ViolationKind",

    # Generation
    "GenerationClient",
    "GeminiClient",
    "GenerationConfig",
    "resolve_api_key",
    "get_client_factory",

    # Batch
    "BatchOrchestrator",
    "BatchRun",
    "FixedDelayThrottle",
    "get_batch_throttle",
    "build_export_text",
    "export_filename",
]
