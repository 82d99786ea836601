"""
Engines for Vellum

- pdf: PDF document engines (load, save, draw, georeference)
- image: image embedders selected by file signature
"""
