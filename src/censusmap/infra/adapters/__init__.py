"""
Concrete source adapters (tabular files, vector files, archives, URLs).

Important: keep this package import side-effect free.
Do not import adapter modules here.
"""
__all__: list[str] = []
