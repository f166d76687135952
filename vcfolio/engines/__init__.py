"""
VCFolio Engines

Pure computation used by the API layer. Nothing here touches the
database or the filesystem.
"""
