import uvicorn
from blockqueue.config import global_config

def main():
    # Load config early to get host/port
    server = global_config.config.server

    print(f"Starting blockqueue on {server.host}:{server.port}...")
    uvicorn.run("blockqueue.app:create_app", factory=True, host=server.host, port=server.port, reload=False)

if __name__ == "__main__":
    main()
