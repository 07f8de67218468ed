"""
config.py - System Configuration Settings
==========================================
Central configuration for the tile layout planning system.
"""

from typing import Dict, Any


class Config:
    """System-wide configuration settings."""

    # ============================================================================
    # TILING CONFIGURATION
    # ============================================================================

    TILING = {
        'circle_steps': 48,             # N-gon used for circular exclusions
        'margin_multiplier': 3,         # Extra lattice steps around the room bounds
        'max_preview_tiles': 12000,     # Pre-flight cap on candidate placements
        'tile_area_tolerance': 0.999,   # Clipped/full area ratio counted as full
        'bond_period_min': 2,
        'bond_period_max': 12,
        'bond_period_epsilon': 1e-6,
        'hex_step_ratio': 0.75,
        'epsilon': 1e-6,
    }

    # ============================================================================
    # CUT ANALYSIS CONFIGURATION
    # ============================================================================

    CUT_ANALYSIS = {
        'triangular_min_ratio': 0.45,
        'triangular_max_ratio': 0.6,
        'bbox_tolerance': 0.01,         # cm
        'area_match_fraction': 0.01,    # of one tile's area
        'combined_area_fraction': 1.01,
    }

    # ============================================================================
    # SKIRTING CONFIGURATION
    # ============================================================================

    SKIRTING = {
        'epsilon': 1e-4,                # Collinearity/containment tolerance (cm)
        'max_strips_per_tile': 2,
        'default_height_cm': 6.0,
    }

    # ============================================================================
    # WASTE CONFIGURATION
    # ============================================================================

    WASTE = {
        'allow_rotate': True,
        'optimize_cuts': False,
        'kerf_cm': 0.0,
        'share_offcuts': False,
        'min_offcut_side_cm': 0.1,
    }

    # ============================================================================
    # PRICING CONFIGURATION
    # ============================================================================

    PRICING = {
        'price_per_m2': 0.0,
        'pack_m2': 0.0,
        'reserve_tiles': 0,
        'currency_symbol': '€',
        'decimal_places': 2,
    }

    # ============================================================================
    # LOGGING CONFIGURATION
    # ============================================================================

    LOGGING = {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'date_format': '%Y-%m-%d %H:%M:%S',
        'file': None,
        'max_bytes': 10 * 1024 * 1024,  # 10 MB
        'backup_count': 5,
        'console_output': True
    }

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-notation key."""
        keys = key.split('.')
        value = cls

        for k in keys:
            if isinstance(value, dict):
                if k not in value:
                    return default
                value = value[k]
            elif hasattr(value, k):
                value = getattr(value, k)
            else:
                return default

        return value

    @classmethod
    def set(cls, key: str, value: Any):
        """Set configuration value by dot-notation key."""
        keys = key.split('.')
        target = cls

        for k in keys[:-1]:
            if isinstance(target, dict) and k in target:
                target = target[k]
            elif hasattr(target, k):
                target = getattr(target, k)
            else:
                raise KeyError(f"Configuration key not found: {key}")

        final_key = keys[-1]
        if isinstance(target, dict):
            target[final_key] = value
        elif hasattr(target, final_key):
            setattr(target, final_key, value)
        else:
            raise KeyError(f"Cannot set configuration key: {key}")

    @classmethod
    def to_dict(cls) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        result = {}

        for attr in dir(cls):
            if not attr.startswith('_') and attr.isupper():
                value = getattr(cls, attr)
                if not callable(value):
                    result[attr] = value

        return result

    @classmethod
    def from_file(cls, filepath: str):
        """Load configuration from JSON or YAML file.

        Dict sections are merged key by key so a file only needs to carry
        the values it overrides.
        """
        import json

        filepath = str(filepath)
        with open(filepath, 'r') as f:
            if filepath.endswith('.json'):
                config_data = json.load(f)
            elif filepath.endswith(('.yml', '.yaml')):
                import yaml
                config_data = yaml.safe_load(f)
            else:
                raise ValueError(f"Unsupported config file format: {filepath}")

        for key, value in (config_data or {}).items():
            if not hasattr(cls, key):
                continue
            current = getattr(cls, key)
            if isinstance(current, dict) and isinstance(value, dict):
                current.update(value)
            else:
                setattr(cls, key, value)

    @classmethod
    def save_to_file(cls, filepath: str):
        """Save configuration to JSON or YAML file."""
        import json

        filepath = str(filepath)
        config_data = cls.to_dict()

        with open(filepath, 'w') as f:
            if filepath.endswith('.json'):
                json.dump(config_data, f, indent=2, default=str)
            elif filepath.endswith(('.yml', '.yaml')):
                import yaml
                yaml.safe_dump(config_data, f, default_flow_style=False)
            else:
                raise ValueError(f"Unsupported config file format: {filepath}")

