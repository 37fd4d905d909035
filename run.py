"""Server run script."""

import uvicorn
from dropsim.api.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "dropsim.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
