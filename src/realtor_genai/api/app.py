from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Awaitable, Callable

import httpx
from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse, Response

from realtor_genai.assets import CORS_HEADERS, AssetResolver, response_headers
from realtor_genai.config import Settings, settings as default_settings
from realtor_genai.copywriting.generator import CopyGenerator
from realtor_genai.copywriting.prompts import build_email_prompt, build_listing_prompt, build_social_post_prompt
from realtor_genai.errors import ApiError, InvalidInputError
from realtor_genai.images import ImageStore
from realtor_genai.models import (
    EmailRequest,
    GenerationIn,
    GenerationResponse,
    ImageUploadResponse,
    ListingRequest,
    ProjectContentIn,
    PropertyProject,
    SocialPostRequest,
    UserProfile,
)
from realtor_genai.providers.base import ChatPrompt
from realtor_genai.storage import ProjectStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """External clients, built once per process and handed to each request."""

    copywriter: CopyGenerator | None = None
    assets: AssetResolver | None = None
    images: ImageStore | None = None
    store: ProjectStore | None = None
    follow_up_max_tokens: int = 1600
    _closers: list[Callable[[], Awaitable[None]]] = field(default_factory=list)

    async def aclose(self) -> None:
        for close in self._closers:
            await close()


def build_services(cfg: Settings) -> Services:
    services = Services(follow_up_max_tokens=cfg.follow_up_max_tokens)

    if cfg.openai_api_key:
        from realtor_genai.providers.openai_provider import OpenAIChatProvider

        provider = OpenAIChatProvider(api_key=cfg.openai_api_key, model=cfg.openai_text_model)
        services.copywriter = CopyGenerator(provider, max_tokens=cfg.generation_max_tokens)
        services._closers.append(provider.aclose)
    else:
        logger.warning("OPENAI_API_KEY is not set; generation routes are disabled")

    if cfg.supabase_url and cfg.supabase_anon_key:
        from realtor_genai.providers.supabase_provider import SupabaseStorageProvider, create_supabase_client

        client = create_supabase_client(cfg.supabase_url, cfg.supabase_anon_key)
        object_store = SupabaseStorageProvider(client)
        http = httpx.AsyncClient(timeout=cfg.asset_fetch_timeout, follow_redirects=True)
        services.assets = AssetResolver.signed_then_public(
            object_store,
            http,
            expires_in=cfg.signed_url_expires_in,
            default_bucket=cfg.storage_default_bucket,
        )
        services.images = ImageStore(object_store, default_bucket=cfg.storage_default_bucket)
        services.store = ProjectStore(client)
        services._closers.append(http.aclose)
    else:
        logger.warning("SUPABASE_URL / SUPABASE_ANON_KEY are not set; storage routes are disabled")

    return services


def get_services(request: Request) -> Services:
    return request.app.state.services


def _get_copywriter(services: Services = Depends(get_services)) -> CopyGenerator:
    if services.copywriter is None:
        raise ApiError(500, "OPENAI_API_KEY is not set")
    return services.copywriter


def _get_assets(services: Services = Depends(get_services)) -> AssetResolver:
    if services.assets is None:
        raise ApiError(500, "Supabase storage is not configured", headers=CORS_HEADERS)
    return services.assets


def _get_images(services: Services = Depends(get_services)) -> ImageStore:
    if services.images is None:
        raise ApiError(500, "Supabase storage is not configured")
    return services.images


def _get_store(services: Services = Depends(get_services)) -> ProjectStore:
    if services.store is None:
        raise ApiError(500, "Supabase is not configured")
    return services.store


async def _generate(
    copywriter: CopyGenerator,
    prompt: ChatPrompt,
    failure_message: str,
    count: int = 3,
    max_tokens: int | None = None,
) -> GenerationResponse:
    try:
        variations = await copywriter.generate_variations(prompt, count=count, max_tokens=max_tokens)
    except Exception as exc:
        logger.exception("%s", failure_message)
        raise ApiError(500, failure_message) from exc
    return GenerationResponse(variations=variations)


def create_app(services: Services | None = None, cfg: Settings | None = None) -> FastAPI:
    cfg = cfg or default_settings
    logging.basicConfig(level=cfg.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = getattr(app.state, "services", None) is None
        if owned:
            app.state.services = build_services(cfg)
        try:
            yield
        finally:
            if owned:
                await app.state.services.aclose()

    app = FastAPI(title="realtor_genai", lifespan=lifespan)
    if services is not None:
        app.state.services = services

    @app.exception_handler(ApiError)
    async def _api_error(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse({"error": exc.message}, status_code=exc.status_code, headers=exc.headers)

    # Copy generation

    @app.post("/api/openai/generate-social-post", response_model=GenerationResponse)
    async def generate_social_post(
        payload: SocialPostRequest,
        copywriter: CopyGenerator = Depends(_get_copywriter),
    ) -> GenerationResponse:
        return await _generate(copywriter, build_social_post_prompt(payload), "Failed to generate social media post")

    @app.post("/api/openai/generate-listing", response_model=GenerationResponse)
    async def generate_listing(
        payload: ListingRequest,
        copywriter: CopyGenerator = Depends(_get_copywriter),
    ) -> GenerationResponse:
        return await _generate(copywriter, build_listing_prompt(payload), "Failed to generate listing")

    @app.post("/api/openai/generate-email", response_model=GenerationResponse)
    async def generate_email(
        payload: EmailRequest,
        copywriter: CopyGenerator = Depends(_get_copywriter),
        services: Services = Depends(get_services),
    ) -> GenerationResponse:
        prompt = build_email_prompt(payload)
        if payload.email_type == "follow-up":
            # A single completion already carries the whole sequence.
            return await _generate(
                copywriter, prompt, "Failed to generate email", count=1, max_tokens=services.follow_up_max_tokens
            )
        return await _generate(copywriter, prompt, "Failed to generate email")

    # Storage proxy

    @app.options("/api/supabase-proxy")
    async def storage_proxy_preflight() -> Response:
        return Response(status_code=204, headers=CORS_HEADERS)

    @app.get("/api/supabase-proxy")
    async def storage_proxy(
        path: str | None = None,
        bucket: str | None = None,
        services: Services = Depends(get_services),
    ) -> Response:
        if not path:
            raise ApiError(400, "File path is required", headers=CORS_HEADERS)
        resolver = _get_assets(services)
        ref = resolver.ref(path, bucket)
        logger.info("proxy request for file: %s/%s", ref.bucket, ref.path)
        try:
            outcomes = await resolver.resolve(ref)
        except Exception as exc:
            logger.exception("error in storage proxy")
            raise ApiError(500, "Internal server error", headers=CORS_HEADERS) from exc

        final = outcomes[-1] if outcomes else None
        if final is None or final.asset is None:
            raise ApiError(404, "File not found", headers=CORS_HEADERS)
        return Response(content=final.asset.body, status_code=200, headers=response_headers(final.asset))

    # Image uploads

    @app.post("/api/images", response_model=ImageUploadResponse, status_code=201)
    async def upload_image(
        file: UploadFile = File(...),
        bucket: str | None = Form(None),
        path_prefix: str | None = Form(None),
        images: ImageStore = Depends(_get_images),
    ) -> ImageUploadResponse:
        content = await file.read()
        try:
            uploaded = await images.upload(content, file.filename or "", file.content_type, bucket, path_prefix)
        except InvalidInputError as exc:
            raise ApiError(400, str(exc)) from exc
        except Exception as exc:
            logger.exception("image upload failed")
            raise ApiError(500, "Failed to upload image") from exc
        return ImageUploadResponse(url=uploaded.url, path=uploaded.path, bucket=uploaded.bucket)

    @app.delete("/api/images")
    async def delete_image(
        url: str = "",
        bucket: str | None = None,
        images: ImageStore = Depends(_get_images),
    ) -> dict[str, Any]:
        try:
            path = await images.delete(url, bucket)
        except InvalidInputError as exc:
            raise ApiError(400, str(exc)) from exc
        except Exception as exc:
            logger.exception("image deletion failed")
            raise ApiError(500, "Failed to delete image") from exc
        return {"success": True, "path": path}

    # Profiles, projects and generations

    def _db_call(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except InvalidInputError as exc:
            raise ApiError(400, str(exc)) from exc
        except Exception as exc:
            logger.exception("database error in %s", fn.__name__)
            raise ApiError(500, "Database request failed") from exc

    @app.get("/api/profiles/{user_id}", response_model=UserProfile)
    def get_profile(user_id: str, store: ProjectStore = Depends(_get_store)) -> dict[str, Any]:
        profile = _db_call(store.get_profile, user_id)
        if profile is None:
            raise ApiError(404, "Profile not found")
        return profile

    @app.post("/api/profiles/{user_id}", response_model=UserProfile)
    def create_profile(
        user_id: str,
        data: dict[str, Any] | None = None,
        store: ProjectStore = Depends(_get_store),
    ) -> dict[str, Any]:
        profile = _db_call(store.create_profile, user_id, data)
        if profile is None:
            raise ApiError(500, "Database request failed")
        return profile

    @app.patch("/api/profiles/{user_id}")
    def update_profile(
        user_id: str,
        updates: dict[str, Any],
        store: ProjectStore = Depends(_get_store),
    ) -> dict[str, bool]:
        _db_call(store.update_profile, user_id, updates)
        return {"success": True}

    @app.get("/api/projects")
    def list_projects(user_id: str, store: ProjectStore = Depends(_get_store)) -> list[dict[str, Any]]:
        return _db_call(store.list_projects, user_id)

    @app.post("/api/projects", status_code=201)
    def add_project(payload: PropertyProject, store: ProjectStore = Depends(_get_store)) -> dict[str, Any] | None:
        return _db_call(store.add_project, payload.model_dump(exclude_none=True))

    @app.get("/api/projects/{project_id}")
    def get_project(project_id: str, store: ProjectStore = Depends(_get_store)) -> dict[str, Any]:
        project = _db_call(store.get_project, project_id)
        if project is None:
            raise ApiError(404, "Project not found")
        return project

    @app.patch("/api/projects/{project_id}")
    def update_project(
        project_id: str,
        updates: dict[str, Any],
        store: ProjectStore = Depends(_get_store),
    ) -> dict[str, Any] | None:
        return _db_call(store.update_project, project_id, updates)

    @app.delete("/api/projects/{project_id}")
    def delete_project(project_id: str, store: ProjectStore = Depends(_get_store)) -> dict[str, bool]:
        _db_call(store.delete_project, project_id)
        return {"success": True}

    @app.get("/api/projects/{project_id}/content")
    def list_project_content(
        project_id: str,
        content_type: str | None = None,
        store: ProjectStore = Depends(_get_store),
    ) -> list[dict[str, Any]]:
        return _db_call(store.list_project_content, project_id, content_type)

    @app.post("/api/projects/{project_id}/content", status_code=201)
    def save_project_content(
        project_id: str,
        payload: ProjectContentIn,
        store: ProjectStore = Depends(_get_store),
    ) -> dict[str, Any]:
        return _db_call(
            store.save_project_content,
            project_id,
            payload.user_id,
            payload.content_type,
            payload.content,
            payload.metadata,
        )

    @app.delete("/api/content/{content_id}")
    def delete_project_content(content_id: str, store: ProjectStore = Depends(_get_store)) -> dict[str, bool]:
        _db_call(store.delete_project_content, content_id)
        return {"success": True}

    @app.get("/api/generations")
    def list_generations(
        user_id: str,
        type: str | None = None,
        store: ProjectStore = Depends(_get_store),
    ) -> list[dict[str, Any]]:
        return _db_call(store.list_generations, user_id, type)

    @app.post("/api/generations", status_code=201)
    def save_generation(payload: GenerationIn, store: ProjectStore = Depends(_get_store)) -> dict[str, Any] | None:
        return _db_call(
            store.save_generation,
            payload.user_id,
            payload.content,
            payload.type,
            payload.metadata,
            payload.project_id,
        )

    @app.delete("/api/generations/{generation_id}")
    def delete_generation(generation_id: str, store: ProjectStore = Depends(_get_store)) -> dict[str, bool]:
        _db_call(store.delete_generation, generation_id)
        return {"success": True}

    return app


app = create_app()
