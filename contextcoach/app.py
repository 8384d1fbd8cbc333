"""FastAPI application exposing requirement analysis, developers and tickets."""
from __future__ import annotations

import logging
import time
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import (APIRouter, Depends, FastAPI, File, Form, Query, Request,
                     UploadFile)
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .analysis import AnalysisService, StoryPointEstimate
from .config import Settings
from .errors import ContextCoachError
from .llm import LLMClient, get_default_client
from .schemas import (AmbiguityResultResponse, DeveloperProfileRequest,
                      DeveloperProfileResponse, ErrorResponse,
                      ImplementationPlanResponse, RepositoryAnalysisRequest,
                      RepositoryAnalysisResponse, RequirementResponse,
                      RequirementTextRequest, ScopeResultResponse, ServiceInfo,
                      StoryPointsResponse, TicketCreateRequest, TicketResponse)
from .search import ContextSearchClient, get_default_search
from .services import (DeveloperProfileService, RequirementService,
                       TicketService)
from .store import Store

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@dataclass
class Services:
    """Everything the routes need, constructed once per application."""

    settings: Settings
    llm: LLMClient
    search: ContextSearchClient
    store: Store
    analysis: AnalysisService
    requirements: RequirementService
    developers: DeveloperProfileService
    tickets: TicketService


def build_services(
    settings: Settings | None = None,
    *,
    llm: LLMClient | None = None,
    search: ContextSearchClient | None = None,
    store: Store | None = None,
) -> Services:
    settings = settings or Settings.from_env()
    llm = llm or get_default_client(settings)
    search = search or get_default_search(settings)
    store = store or Store()
    analysis = AnalysisService(llm=llm)
    requirements = RequirementService(store=store, analysis=analysis)
    return Services(
        settings=settings,
        llm=llm,
        search=search,
        store=store,
        analysis=analysis,
        requirements=requirements,
        developers=DeveloperProfileService(store=store),
        tickets=TicketService(store=store, requirements=requirements, settings=settings),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def _error_body(request: Request, status: int, error: str, message: str) -> JSONResponse:
    payload = ErrorResponse(
        timestamp=datetime.now(timezone.utc),
        status=status,
        error=error,
        message=message,
        path=request.url.path,
    )
    return JSONResponse(status_code=status, content=jsonable_encoder(payload))


async def handle_contextcoach_error(request: Request, exc: ContextCoachError) -> JSONResponse:
    log = logger.warning if exc.status_code < 500 else logger.error
    log("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_body(request, exc.status_code, exc.error, exc.message)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    )
    logger.warning("Invalid request to %s: %s", request.url.path, details)
    return _error_body(request, 400, "Bad Request", details or "Invalid request")


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error handling %s %s", request.method, request.url.path)
    return _error_body(request, 500, "Internal Server Error", "An unexpected error occurred")


def _requirement(item) -> RequirementResponse:
    return RequirementResponse(**asdict(item))


def _story_points(estimate: StoryPointEstimate) -> StoryPointsResponse:
    return StoryPointsResponse(**asdict(estimate))


def _developer(item) -> DeveloperProfileResponse:
    return DeveloperProfileResponse(**asdict(item))


def _ticket(item) -> TicketResponse:
    return TicketResponse(**asdict(item))


router = APIRouter()


@router.get("/", response_model=ServiceInfo)
def home(services: Services = Depends(get_services)) -> ServiceInfo:
    return ServiceInfo(
        name="ContextCoach",
        version=__version__,
        llm_client=type(services.llm).__name__,
        context_search=getattr(services.search, "name", type(services.search).__name__),
    )


@router.post(
    "/api/requirements/text",
    response_model=RequirementResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
)
def create_requirement_from_text(
    request: RequirementTextRequest,
    services: Services = Depends(get_services),
) -> RequirementResponse:
    requirement = services.requirements.create_from_text(
        request.title, request.content, request.clarity_score
    )
    return _requirement(requirement)


@router.post(
    "/api/requirements/upload",
    response_model=RequirementResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
)
async def upload_requirement(
    file: UploadFile = File(..., description="Requirement document"),
    title: str = Form(..., description="Requirement title"),
    services: Services = Depends(get_services),
) -> RequirementResponse:
    content = await file.read()
    await file.close()
    requirement = services.requirements.create_from_file(
        filename=file.filename,
        content_type=file.content_type,
        data=content,
        title=title,
    )
    return _requirement(requirement)


@router.get("/api/requirements", response_model=List[RequirementResponse])
def list_requirements(services: Services = Depends(get_services)) -> List[RequirementResponse]:
    return [_requirement(item) for item in services.requirements.list()]


@router.get(
    "/api/requirements/{requirement_id}",
    response_model=RequirementResponse,
    responses=ERROR_RESPONSES,
)
def get_requirement(
    requirement_id: str,
    services: Services = Depends(get_services),
) -> RequirementResponse:
    return _requirement(services.requirements.get(requirement_id))


@router.post(
    "/api/requirements/{requirement_id}/analyze",
    response_model=AmbiguityResultResponse,
    responses=ERROR_RESPONSES,
)
def analyze_requirement(
    requirement_id: str,
    services: Services = Depends(get_services),
) -> AmbiguityResultResponse:
    result = services.requirements.analyze(requirement_id)
    return AmbiguityResultResponse(**asdict(result))


@router.post(
    "/api/requirements/{requirement_id}/estimate",
    response_model=ScopeResultResponse,
    responses=ERROR_RESPONSES,
)
def estimate_scope(
    requirement_id: str,
    services: Services = Depends(get_services),
) -> ScopeResultResponse:
    result = services.requirements.estimate_scope(requirement_id)
    return ScopeResultResponse(**asdict(result))


@router.post(
    "/api/requirements/{requirement_id}/plan",
    response_model=ImplementationPlanResponse,
    responses=ERROR_RESPONSES,
)
def generate_plan(
    requirement_id: str,
    services: Services = Depends(get_services),
) -> ImplementationPlanResponse:
    plan = services.requirements.generate_plan(requirement_id)
    return ImplementationPlanResponse(**asdict(plan))


@router.post(
    "/api/requirements/{requirement_id}/story-points",
    response_model=StoryPointsResponse,
    responses=ERROR_RESPONSES,
)
def calculate_story_points(
    requirement_id: str,
    repository_complexity: Optional[float] = Query(None, ge=0.0, le=1.0),
    services: Services = Depends(get_services),
) -> StoryPointsResponse:
    estimate = services.requirements.calculate_story_points(requirement_id, repository_complexity)
    return _story_points(estimate)


@router.post(
    "/api/requirements/{requirement_id}/story-points/developer/{developer_id}",
    response_model=StoryPointsResponse,
    responses=ERROR_RESPONSES,
)
def calculate_story_points_with_developer(
    requirement_id: str,
    developer_id: str,
    repository_complexity: Optional[float] = Query(None, ge=0.0, le=1.0),
    services: Services = Depends(get_services),
) -> StoryPointsResponse:
    estimate = services.requirements.calculate_story_points_with_developer(
        requirement_id, developer_id, repository_complexity
    )
    return _story_points(estimate)


@router.get(
    "/api/requirements/{requirement_id}/ambiguity-results",
    response_model=List[AmbiguityResultResponse],
    responses=ERROR_RESPONSES,
)
def list_ambiguity_results(
    requirement_id: str,
    services: Services = Depends(get_services),
) -> List[AmbiguityResultResponse]:
    return [
        AmbiguityResultResponse(**asdict(item))
        for item in services.requirements.ambiguity_results(requirement_id)
    ]


@router.get(
    "/api/requirements/{requirement_id}/scope-results",
    response_model=List[ScopeResultResponse],
    responses=ERROR_RESPONSES,
)
def list_scope_results(
    requirement_id: str,
    services: Services = Depends(get_services),
) -> List[ScopeResultResponse]:
    return [
        ScopeResultResponse(**asdict(item))
        for item in services.requirements.scope_results(requirement_id)
    ]


@router.get(
    "/api/requirements/{requirement_id}/plans",
    response_model=List[ImplementationPlanResponse],
    responses=ERROR_RESPONSES,
)
def list_plans(
    requirement_id: str,
    services: Services = Depends(get_services),
) -> List[ImplementationPlanResponse]:
    return [
        ImplementationPlanResponse(**asdict(item))
        for item in services.requirements.plans(requirement_id)
    ]


@router.post(
    "/api/analysis/repository",
    response_model=RepositoryAnalysisResponse,
    responses=ERROR_RESPONSES,
)
def analyze_repository(
    request: RepositoryAnalysisRequest,
    services: Services = Depends(get_services),
) -> RepositoryAnalysisResponse:
    analysis = services.analysis.analyze_repository(request.content)
    return RepositoryAnalysisResponse(**asdict(analysis))


@router.post(
    "/api/developers",
    response_model=DeveloperProfileResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
)
def create_developer(
    request: DeveloperProfileRequest,
    services: Services = Depends(get_services),
) -> DeveloperProfileResponse:
    profile = services.developers.create(
        request.name,
        request.experience_level,
        request.productivity_factor,
        request.skills,
        request.preferred_work_hours_per_day,
    )
    return _developer(profile)


@router.get("/api/developers", response_model=List[DeveloperProfileResponse])
def list_developers(services: Services = Depends(get_services)) -> List[DeveloperProfileResponse]:
    return [_developer(item) for item in services.developers.list()]


@router.get(
    "/api/developers/search/name",
    response_model=List[DeveloperProfileResponse],
    responses=ERROR_RESPONSES,
)
def search_developers_by_name(
    name: str = Query(...),
    services: Services = Depends(get_services),
) -> List[DeveloperProfileResponse]:
    return [_developer(item) for item in services.developers.search_by_name(name)]


@router.get(
    "/api/developers/search/experience",
    response_model=List[DeveloperProfileResponse],
    responses=ERROR_RESPONSES,
)
def search_developers_by_experience(
    experience_level: str = Query(...),
    services: Services = Depends(get_services),
) -> List[DeveloperProfileResponse]:
    return [_developer(item) for item in services.developers.search_by_experience(experience_level)]


@router.get(
    "/api/developers/search/skill",
    response_model=List[DeveloperProfileResponse],
    responses=ERROR_RESPONSES,
)
def search_developers_by_skill(
    skill: str = Query(...),
    services: Services = Depends(get_services),
) -> List[DeveloperProfileResponse]:
    return [_developer(item) for item in services.developers.search_by_skill(skill)]


@router.get(
    "/api/developers/{developer_id}",
    response_model=DeveloperProfileResponse,
    responses=ERROR_RESPONSES,
)
def get_developer(
    developer_id: str,
    services: Services = Depends(get_services),
) -> DeveloperProfileResponse:
    return _developer(services.developers.get(developer_id))


@router.put(
    "/api/developers/{developer_id}",
    response_model=DeveloperProfileResponse,
    responses=ERROR_RESPONSES,
)
def update_developer(
    developer_id: str,
    request: DeveloperProfileRequest,
    services: Services = Depends(get_services),
) -> DeveloperProfileResponse:
    profile = services.developers.update(
        developer_id,
        request.name,
        request.experience_level,
        request.productivity_factor,
        request.skills,
        request.preferred_work_hours_per_day,
    )
    return _developer(profile)


@router.delete("/api/developers/{developer_id}", status_code=204, responses=ERROR_RESPONSES)
def delete_developer(developer_id: str, services: Services = Depends(get_services)) -> None:
    services.developers.delete(developer_id)


@router.post(
    "/api/jira/tickets",
    response_model=TicketResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
)
def create_ticket(
    request: TicketCreateRequest,
    services: Services = Depends(get_services),
) -> TicketResponse:
    ticket = services.tickets.create_ticket(
        request.requirement_id,
        request.ticket_type,
        request.priority,
        request.assigned_developer_id,
    )
    return _ticket(ticket)


@router.get("/api/jira/tickets", response_model=List[TicketResponse])
def list_tickets(services: Services = Depends(get_services)) -> List[TicketResponse]:
    return [_ticket(item) for item in services.tickets.list()]


@router.get("/api/jira/tickets/{ticket_id}", response_model=TicketResponse, responses=ERROR_RESPONSES)
def get_ticket(ticket_id: str, services: Services = Depends(get_services)) -> TicketResponse:
    return _ticket(services.tickets.get(ticket_id))


@router.get("/api/jira/tickets/requirement/{requirement_id}", response_model=List[TicketResponse])
def list_tickets_for_requirement(
    requirement_id: str,
    services: Services = Depends(get_services),
) -> List[TicketResponse]:
    return [_ticket(item) for item in services.tickets.for_requirement(requirement_id)]


@router.get("/api/jira/tickets/developer/{developer_id}", response_model=List[TicketResponse])
def list_tickets_for_developer(
    developer_id: str,
    services: Services = Depends(get_services),
) -> List[TicketResponse]:
    return [_ticket(item) for item in services.tickets.for_developer(developer_id)]


def create_app(services: Services | None = None) -> FastAPI:
    """Build the FastAPI application around *services* (built from env if omitted)."""
    application = FastAPI(
        title="ContextCoach – Requirement Analysis Assistant",
        version=__version__,
    )
    application.state.services = services or build_services()
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = str(uuid.uuid4())
        started = time.perf_counter()
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        logger.info("REQUEST [%s] %s %s", request_id, request.method, target)
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("FAILED [%s] %s %s", request_id, request.method, target)
            response = _error_body(
                request, 500, "Internal Server Error", "An unexpected error occurred"
            )
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "RESPONSE [%s] %s %s -> %s in %.1f ms",
            request_id,
            request.method,
            target,
            response.status_code,
            elapsed_ms,
        )
        response.headers["X-Request-ID"] = request_id
        return response

    application.add_exception_handler(ContextCoachError, handle_contextcoach_error)
    application.add_exception_handler(RequestValidationError, handle_validation_error)
    application.add_exception_handler(Exception, handle_unexpected_error)
    application.include_router(router)
    return application


app = create_app()
