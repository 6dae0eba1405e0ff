import logging

import uvicorn

from exam_evaluator.config import DEBUG, HOST, PORT
from exam_evaluator.main import create_app

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("exam_evaluator")

app = create_app()

if __name__ == "__main__":
    logger.info(f"Starting Exam Evaluator on {HOST}:{PORT}")
    uvicorn.run(app, host=HOST, port=PORT)
