import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from colorama import Fore, Style, init

init(autoreset=True)


class CoachLogger:
    """Coloured console log plus an optional JSON event log on disk.

    One instance is kept per interview session; the engine owns a shared
    instance without a log file for calls made outside a session. History
    is only kept when it is written to disk, so an instance without a log
    file stays bounded.
    """

    COLORS = {
        "Engine": Fore.CYAN,
        "Interview": Fore.GREEN,
        "Speech": Fore.YELLOW,
        "Media": Fore.MAGENTA,
        "Career": Fore.BLUE,
        "Mentor": Fore.BLUE,
        "Profile": Fore.WHITE,
        "System": Fore.WHITE,
    }

    def __init__(self, log_dir: str | None = None, session_id: str | None = None):
        self.log_dir = Path(log_dir) if log_dir else None
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        self.session_id = session_id
        self.log_file = self._new_log_file()
        self.log_data = self._empty_log()
        self._setup_logger()

    def _setup_logger(self):
        logger = logging.getLogger("pathfinder")
        logger.setLevel(logging.INFO)
        if not logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter('%(message)s'))
            logger.addHandler(handler)
        self.logger = logger

    def _new_log_file(self) -> Path | None:
        if self.log_dir is None:
            return None
        stamp = datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')
        name = f"session_{self.session_id}_{stamp}.json" if self.session_id else f"coach_log_{stamp}.json"
        return self.log_dir / name

    def _empty_log(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "events": [],
            "transitions": [],
            "metrics": {
                "total_tokens": 0,
                "prompt_tokens": 0,
                "completion_tokens": 0,
                "latency_ms": [],
            }
        }

    def log(self, component: str, message: str, data: Dict[str, Any] | None = None, level: int = logging.INFO):
        if self.log_file is not None:
            self.log_data["events"].append({
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "component": component,
                "message": message,
                "data": data or {}
            })

        color = self.COLORS.get(component, Fore.WHITE)
        prefix = f"[LOG :: {component.upper()}]"
        if self.session_id:
            prefix += f" <{self.session_id}>"
        formatted_msg = f"{color}{prefix}{Style.RESET_ALL} {message}"
        if data:
            formatted_msg += f" | Data: {json.dumps(data, ensure_ascii=False, default=str)}"

        self.logger.log(level, formatted_msg)
        self._save_log()

    def warning(self, component: str, message: str, data: Dict[str, Any] | None = None):
        self.log(component, message, data, level=logging.WARNING)

    def log_state_transition(self, from_state: str, to_state: str, reason: str = ""):
        if self.log_file is not None:
            self.log_data["transitions"].append({
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "from": from_state,
                "to": to_state,
                "reason": reason
            })
        self.log("Interview", f"State transition: {from_state} → {to_state}", {"reason": reason} if reason else None)

    def log_tokens(self, prompt_tokens: int, completion_tokens: int):
        metrics = self.log_data["metrics"]
        metrics["prompt_tokens"] += prompt_tokens
        metrics["completion_tokens"] += completion_tokens
        metrics["total_tokens"] += prompt_tokens + completion_tokens
        self.log("Engine", f"[METRIC :: TOKENS] +{prompt_tokens} prompt, +{completion_tokens} completion")

    def log_latency(self, latency_ms: float):
        if self.log_file is not None:
            self.log_data["metrics"]["latency_ms"].append(latency_ms)
        self.log("Engine", f"[METRIC :: LATENCY] {latency_ms:.2f}ms")

    def _save_log(self):
        if self.log_file is None:
            return
        try:
            with open(self.log_file, 'w', encoding='utf-8') as f:
                json.dump(self.log_data, f, ensure_ascii=False, indent=2, default=str)
        except OSError as e:
            self.logger.error(f"Error saving log {self.log_file}: {e}")

    def get_log_data(self) -> Dict[str, Any]:
        return self.log_data.copy()
