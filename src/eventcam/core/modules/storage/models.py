from enum import StrEnum


class StorageOperation(StrEnum):
    """Operation a capability URL grants on one object."""

    READ = "read"  # GET
    WRITE = "write"  # PUT


CLIENT_METHODS: dict[StorageOperation, str] = {
    StorageOperation.READ: "get_object",
    StorageOperation.WRITE: "put_object",
}
