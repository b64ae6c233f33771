import logging
import sys
from pathlib import Path

# Log files live next to this module
log_dir = Path(__file__).parent
log_dir.mkdir(exist_ok=True)

def setup_logging():
    logger = logging.getLogger("api_logger")
    logger.setLevel(logging.INFO)
    
    # Module may be imported more than once under reload
    if logger.handlers:
        return logger
    
    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
    
    file_handler = logging.FileHandler(log_dir / "api_requests.log")
    file_handler.setFormatter(formatter)
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)
    
    return logger

api_logger = setup_logging()
