"""
FloodDataSync - Vercel Serverless Entry Point
Uses FastAPI with report submission, peer validation and the dashboard
"""

import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.api.main import app

# Vercel serverless handler
handler = app
