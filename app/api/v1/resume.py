from fastapi import APIRouter, Depends

from app.api.deps import get_description_generator, get_detail_cache
from app.api.v1.schemas import ErrorResponse, GenerateRequest, GenerateResponse
from app.core.exceptions import CustomException, InternalError
from app.core.logging import get_logger
from app.domain.resume.workflow import run_resume_workflow
from app.infra.github.cache import DetailCache
from app.infra.llm.base import BaseDescriptionGenerator

router = APIRouter(prefix="/resume", tags=["resume"])
logger = get_logger(__name__)


@router.post(
    "/generate",
    response_model=GenerateResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid username"},
        404: {"model": ErrorResponse, "description": "User or public repositories not found"},
        500: {"model": ErrorResponse, "description": "GitHub or internal failure"},
    },
)
async def generate_resume(
    request: GenerateRequest,
    cache: DetailCache = Depends(get_detail_cache),
    generator: BaseDescriptionGenerator = Depends(get_description_generator),
) -> GenerateResponse:
    try:
        result = await run_resume_workflow(request.username, cache=cache, generator=generator)
    except CustomException as e:
        logger.warning(
            "이력서 생성 실패 status_code=%d code=%s detail=%s",
            e.status_code,
            getattr(e.error_code, "value", e.error_code),
            e.detail,
        )
        raise
    except Exception as e:
        logger.error("이력서 생성 중 예상치 못한 오류 error=%s", e, exc_info=True)
        raise InternalError(detail=str(e) or type(e).__name__) from e

    logger.info(
        "이력서 생성 완료 skills=%d projects=%d", len(result.skills), len(result.projects)
    )
    return GenerateResponse.from_result(result)
