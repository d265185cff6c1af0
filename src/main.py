import contextlib

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.v1.api import api_router
from core.config import settings
from core.database import init_db, close_db
from core.exception.exception_handlers import register_exception_handlers
from core.logging_config import setup_logging
from domains.auth.gateway import AuthGateway, GoogleAuthGateway
from domains.image.uploader import ImageUploader, CloudinaryImageUploader


def build_auth_gateway() -> AuthGateway:
    return GoogleAuthGateway(
        client_id=settings.GOOGLE_CLIENT_ID,
        client_secret=settings.GOOGLE_CLIENT_SECRET.get_secret_value(),
        redirect_uri=settings.GOOGLE_REDIRECT_URI,
    )


def build_image_uploader() -> ImageUploader:
    return CloudinaryImageUploader(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET.get_secret_value(),
        folder=settings.CLOUDINARY_FOLDER,
    )


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield
    await close_db()


def create_app(
    auth_gateway: AuthGateway | None = None,
    image_uploader: ImageUploader | None = None,
) -> FastAPI:
    setup_logging()

    app = FastAPI(title="Food Recipe API", lifespan=lifespan)

    # 외부 연동 객체는 여기서 한 번 만들어서 app.state 로 넘김
    app.state.auth_gateway = auth_gateway or build_auth_gateway()
    app.state.image_uploader = image_uploader or build_image_uploader()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.FRONTEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {"message": "Food Recipe API is running"}

    return app


app = create_app()


def run() -> None:
    uvicorn.run("main:app", host="0.0.0.0", port=5000)
