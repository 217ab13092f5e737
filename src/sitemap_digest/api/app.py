"""HTTP host for the monitor: health, manual triggers, feed registration and status."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Query

from .. import __version__
from ..core.triggers import TriggerHost

logger = logging.getLogger(__name__)

SERVICE_NAME = "sitemap-digest"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_app(host: TriggerHost) -> FastAPI:
    """Build the FastAPI application around an existing TriggerHost."""
    app = FastAPI(title="Sitemap Digest Monitor", version=__version__)

    @app.get("/health")
    def health():
        return {
            "status": "healthy",
            "timestamp": _now(),
            "service": SERVICE_NAME,
            "version": __version__,
        }

    @app.post("/monitor")
    def monitor():
        host.trigger_manual()
        return {"status": "success", "message": "Monitoring pass started", "timestamp": _now()}

    @app.post("/digest")
    def digest():
        host.trigger_digest()
        return {"status": "success", "message": "Digest check started", "timestamp": _now()}

    @app.get("/api/feeds")
    def list_feeds():
        try:
            feeds = host.context.feed_list.get_feeds()
        except Exception as e:
            logger.error(f"❌ /api/feeds failed to read feeds: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to read feeds: {e}")
        return {"feeds": feeds, "count": len(feeds)}

    @app.post("/api/feeds")
    def add_feed(url: str = Query(..., description="Sitemap or feed URL to monitor")):
        result = host.context.feed_list.add_feed(url)
        if not result["success"]:
            raise HTTPException(status_code=400, detail=result["message"])
        return {"status": "success", "message": result["message"]}

    @app.delete("/api/feeds")
    def remove_feed(url: str = Query(..., description="Monitored URL to drop")):
        result = host.context.feed_list.remove_feed(url)
        if not result["success"]:
            raise HTTPException(status_code=404, detail=result["message"])
        return {"status": "success", "message": result["message"]}

    @app.get("/api/status")
    def status():
        try:
            feeds = host.context.feed_list.get_feeds()
        except Exception as e:
            logger.error(f"❌ /api/status failed to read feeds: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to read feeds: {e}")

        progress = host.context.cursor_store.load()
        return {
            "status": "running",
            "feeds": feeds,
            "progress": progress.to_dict(),
            "timestamp": _now(),
        }

    return app
