"""
deepscan – content-authenticity scoring service.

Entry point:  deepscan.main:app  (FastAPI ASGI application)

Sub-packages:
    ai          Base-score detectors and signal synthesis
    forensic    Filename / metadata heuristics and risk explainability
    monitor     External detector ensemble
    utils       Logging setup
"""
