import os

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from ..core.config import settings

router = APIRouter()

# URL path → HTML file under WEB_ROOT
PAGES = {
    "/": "index.html",
    "/browse": "browse.html",
    "/listing": "listing.html",
    "/about": "about.html",
    "/contact": "contact.html",
    "/auth": "auth.html",
}

def page_path(filename: str) -> str:
    path = os.path.join(os.path.abspath(settings.WEB_ROOT), filename)
    if not os.path.isfile(path):
        raise HTTPException(status_code=404)
    return path

def _page_route(filename: str):
    async def page():
        return FileResponse(page_path(filename), media_type="text/html")
    page.__name__ = f"page_{filename.split('.')[0]}"
    return page

for _url, _file in PAGES.items():
    router.add_api_route(_url, _page_route(_file), methods=["GET"], include_in_schema=False)
