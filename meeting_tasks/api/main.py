from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from meeting_tasks.api.routes.extract import router as extract_router

app = FastAPI(
    title="Meeting Tasks API",
    description="Rule-based and LLM-assisted task extraction from meeting notes",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    allow_origin_regex=r"http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(extract_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    from meeting_tasks.config import settings

    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())
