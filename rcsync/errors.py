"""Exception types raised by rc-sync."""


class RCSyncError(Exception):
    """Base class for rc-sync errors."""
    pass


class DeviceNotConnected(RCSyncError):
    """The device mount point is not present."""
    pass


class BackupDirUnwritable(RCSyncError):
    """The backup root is missing and could not be created."""
    pass


class BackupLocked(RCSyncError):
    """Another run holds the lock on the backup root."""
    pass


class MalformedSlotName(RCSyncError):
    """A name does not follow the NNN_K slot pattern."""
    pass


class CopyFailed(RCSyncError):
    """A track file or bank directory could not be copied, removed or created."""
    pass


class ExportNotFound(RCSyncError):
    """The named export snapshot is missing or holds no tracks."""
    pass


class AmbiguousBank(RCSyncError):
    """The target bank of an export snapshot cannot be determined."""
    pass


class InvalidPromptInput(RCSyncError):
    """A prompt answer is not one of the offered choices."""
    pass
