"""script-template-loader -- discover, register and render script templates."""

__version__ = '0.1.0'
