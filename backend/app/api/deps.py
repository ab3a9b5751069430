from app.services.storage import LocalFileStore, get_storage_service


def get_file_store() -> LocalFileStore:
    return get_storage_service()
