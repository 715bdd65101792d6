"""
Load and parse vpacker configuration files into Pydantic models.
"""
import json
from typing import Optional

import yaml
from pydantic import ValidationError

from vpacker.config.schema import AppConfig

# ---------------------------------------------------------------------------
# Configuration loader with *tab-sanitisation* helper
# ---------------------------------------------------------------------------

def load_config(path: Optional[str]) -> AppConfig:
    """
    Load a YAML or JSON config file and parse into AppConfig.

    ``None`` yields the defaults.
    """
    if path is None:
        return AppConfig()

    path_lower = path.lower()

    had_tabs = False  # track whether we detected tab characters (YAML only)

    # ------------------------------------------------------------------
    # YAML handling with tab sanitisation
    # ------------------------------------------------------------------
    if path_lower.endswith(('.yml', '.yaml')):
        with open(path, 'r', encoding='utf-8') as f:
            raw_text = f.read()

        had_tabs = '\t' in raw_text
        text_for_parser = raw_text.replace('\t', '  ') if had_tabs else raw_text

        try:
            data = yaml.safe_load(text_for_parser)
        except yaml.YAMLError as e:
            msg = f"Failed to parse YAML config '{path}': {e}"
            if had_tabs:
                msg += (
                    "\nNote: tab characters were detected and replaced with spaces "
                    "during parsing.  YAML relies on *space* indentation – "
                    "please convert tabs to spaces and try again."
                )
            raise ValueError(msg) from e

    elif path_lower.endswith('.json'):
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    else:
        raise ValueError('Unsupported config format, must be .yaml/.yml or .json')

    # an empty YAML document means "all defaults"
    if data is None:
        data = {}

    # ------------------------------------------------------------------
    # Pydantic validation
    # ------------------------------------------------------------------
    try:
        return AppConfig.model_validate(data)
    except ValidationError as ve:
        if had_tabs:
            note = (
                "\nThe configuration file contained tab characters which often break "
                "YAML indentation. Replace all tab characters with spaces (e.g. 2 "
                "or 4 spaces) and rerun."
            )
            raise ValueError(str(ve) + note) from ve
        raise
