# app/main.py
import logging

from fastapi import FastAPI

from .catalog import catalog_router
from .config import get_settings
from .pages import router as pages_router
from .view import view_router

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.site_title,
    description=(
        "称号百科: 按时间、名称或随机顺序浏览、搜索称号, "
        "并以瀑布流、网格或列表方式展示。"
    ),
    version="1.0.0",
)


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(catalog_router)
app.include_router(view_router)
app.include_router(pages_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="127.0.0.1", port=8000)
