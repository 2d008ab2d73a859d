# atomchess/config.py
from dataclasses import dataclass, field
from typing import Dict
import os
import tomllib  # python >=3.11

# Material values in pawns, indexed by the engine's piece names.
PIECE_VALUES = {
    "PAWN": 1,
    "ROOK": 5,
    "BISHOP": 3,
    "QUEEN": 9,
    "KNIGHT": 3,
    "KING": 0,
}

@dataclass
class SearchConfig:
    validation_depth: int = 2   # plies, used to check the human's move
    depth: int = 3              # plies, used for the computer's reply
    strict_castling: bool = False  # require unmoved king and rook to castle

@dataclass
class EvalConfig:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())

@dataclass
class UIConfig:
    engine_name: str = "AtomChess"
    engine_author: str = "AtomChess developers"
    human_color: str = "white"

@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"]).upper()
        return cfg

# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("ATOMCHESS_CONFIG_TOML", "config.toml"))
# allow env override of depth and log level for quick debugging
override_depth = os.environ.get("ATOMCHESS_SEARCH_DEPTH")
if override_depth and override_depth.isdigit():
    CONFIG.search.depth = int(override_depth)
if os.environ.get("ATOMCHESS_LOG_LEVEL"):
    CONFIG.log_level = os.environ["ATOMCHESS_LOG_LEVEL"].upper()
