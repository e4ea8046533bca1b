#!/usr/bin/env python3
"""
Wrapper para ejecutar el servidor HTTP de QuickWP con uvicorn
Railway, Render, etc. inyectan el puerto en la variable PORT
"""

import os

import uvicorn

if __name__ == "__main__":
    port = int(os.getenv('PORT', 8000))
    uvicorn.run("quickwp.http_server:app", host="0.0.0.0", port=port)
