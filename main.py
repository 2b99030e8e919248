from typing import Any, Dict

from app.config import get_settings
from fastapi import FastAPI
from lagging.routes import router as lagging_router


settings = get_settings()


app = FastAPI(title="Safety Lagging Indicators")
app.include_router(lagging_router)


@app.get("/health")
def health() -> Dict[str, Any]:
    return {"status": "ok", "defaultConstant": settings.default_constant}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=True)
