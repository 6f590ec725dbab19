# Development server for OxiStore using the in-memory storage backend
from oxistore.main import create_app
from oxistore.config import StoreConfig
app = create_app(StoreConfig(backend='memory', log_level='DEBUG'))
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
