"""One task per public model operation."""

from horizon.tasks.add_contact import AddContactTask
from horizon.tasks.get_data import GetDataTask
from horizon.tasks.publish_file_list import PublishFileListTask
from horizon.tasks.remove_contact import RemoveContactTask
from horizon.tasks.rename_contact import RenameContactTask
from horizon.tasks.share_files import ShareFilesTask
from horizon.tasks.sync import SyncTask
from horizon.tasks.unshare_files import UnshareFilesTask

__all__ = [
    "AddContactTask",
    "GetDataTask",
    "PublishFileListTask",
    "RemoveContactTask",
    "RenameContactTask",
    "ShareFilesTask",
    "SyncTask",
    "UnshareFilesTask",
]
