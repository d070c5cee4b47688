"""
Service status and metrics.
"""
from fastapi import FastAPI
from . import offices

app = FastAPI()

@app.get("/status")
def status():
    return {"status": "running", "service_active": offices._context is not None}

@app.get("/metrics")
def get_metrics():
    context = offices.get_context()
    return context.metrics.get_metrics().to_dict()
