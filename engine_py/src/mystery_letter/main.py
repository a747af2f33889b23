"""FastAPI main application for the Mystery Letter game backend"""

import logging

from .engine import LetterEngine
from .registry import SessionRegistry
from .rules import load_rules_from_env
from .ws import create_app

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

rules = load_rules_from_env()
engine = LetterEngine(SessionRegistry(rules), rules)
app = create_app(engine)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
