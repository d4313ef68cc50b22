from grpc_app.generated import build


if __name__ == "__main__":
    build(force=True)
    print("stubs rebuilt")
