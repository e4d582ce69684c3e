from jotbin import config
from jotbin.storage.backup import BackupService
from jotbin.storage.event_log import EventLog
from jotbin.storage.json_store import JsonStore
from jotbin.storage.notes_store import NotesStore
from jotbin.storage.sessions_store import SessionsStore

# Built at import so tests can point APP_DATA_DIR elsewhere and reload.
DATA_DIR = config.data_dir()

store = JsonStore(DATA_DIR)
notes = NotesStore(store)
sessions = SessionsStore(store)
backups = BackupService(store)
event_log = EventLog(DATA_DIR)
