import json
import os
import sys

# Serverless entrypoint: expose the FastAPI app, or a JSON 500 app if it fails to import
startup_error = None

try:
    from app.main import app
except Exception as e:
    import traceback
    startup_error = {
        "error": "Internal Server Error",
        "message": f"{type(e).__name__}: {e}",
    }
    if os.getenv("APP_ENV", "production").strip().lower() != "production":
        startup_error["stack"] = traceback.format_exc()
        startup_error["python_version"] = sys.version

    # Fallback: minimal ASGI app
    async def app(scope, receive, send):
        if scope["type"] == "http":
            body = json.dumps(startup_error, ensure_ascii=False).encode("utf-8")
            await send({
                "type": "http.response.start",
                "status": 500,
                "headers": [
                    [b"content-type", b"application/json; charset=utf-8"],
                    [b"access-control-allow-origin", b"*"],
                ],
            })
            await send({
                "type": "http.response.body",
                "body": body,
            })
