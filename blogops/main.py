from blogops.api.main import app

if __name__ == "__main__":
    import os
    import uvicorn

    from blogops.core.logging_config import setup_logging

    setup_logging()
    host = os.getenv("BLOGOPS_HOST", "127.0.0.1")
    port = int(os.getenv("BLOGOPS_PORT", "8001"))
    uvicorn.run(app, host=host, port=port)
