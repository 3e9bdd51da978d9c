# monitor.py

import io
import sys
import time

import requests
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

import config
from walker import DirectoryWalker, ExclusionFilter


def send_alert(subject, old_checksum, new_checksum, webhook_url=None, err=None):
    """Post a tamper notice to a Discord-style webhook. Returns True on delivery."""
    err = err if err is not None else sys.stderr
    webhook_url = webhook_url or config.WEBHOOK_URL
    if not webhook_url:
        return False

    print(f"📣 Sending alert: {subject} failed its integrity check!", file=err)
    payload = {
        "content": f"🚨 **Manifest Tampering Detected**\n\n📄 **Target**: `{subject}`\n🧾 **Old Checksum**: `{old_checksum}`\n🆕 **New Checksum**: `{new_checksum}`"
    }
    try:
        response = requests.post(webhook_url, json=payload, timeout=config.WEBHOOK_TIMEOUT)
    except requests.RequestException as e:
        print(f"[ERROR] Webhook error: {e}", file=err)
        return False

    if response.status_code in (200, 204):
        print("✅ Alert sent.", file=err)
        return True
    print(f"[ERROR] Failed to send alert. Status: {response.status_code}", file=err)
    return False


def compute_checksum(root, exclusion=None, sort_entries=False, err=None) -> str:
    """Regenerate the manifest in memory and return its checksum as 8 hex digits."""
    walker = DirectoryWalker(exclusion, out=io.BytesIO(), err=err, sort_entries=sort_entries)
    walker.generate(root)
    return walker.accumulator.hexdigest()


class ManifestMonitorHandler(FileSystemEventHandler):
    """Regenerates the manifest checksum whenever a file under root changes."""

    def __init__(self, root, exclusion=None, sort_entries=False, webhook_url=None, out=None, err=None):
        super().__init__()
        self.root = root
        self.exclusion = exclusion or ExclusionFilter()
        self.sort_entries = sort_entries
        self.webhook_url = webhook_url
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.checksum = self._rehash()

    def _rehash(self):
        return compute_checksum(self.root, self.exclusion, self.sort_entries, self.err)

    def on_any_event(self, event):
        if event.is_directory:
            return

        print(f"\n📡 Detected change: {event.src_path}", file=self.out)
        new_checksum = self._rehash()
        old_checksum = self.checksum
        print(f"🔐 New manifest checksum: {new_checksum}", file=self.out)
        print(f"📦 Previous manifest checksum: {old_checksum}", file=self.out)

        if new_checksum != old_checksum:
            print("⚠️ MANIFEST CHANGED!", file=self.out)
            send_alert(event.src_path, old_checksum, new_checksum, self.webhook_url, self.err)
            self.checksum = new_checksum
        else:
            print("✅ Manifest unchanged.", file=self.out)


def start_monitoring(root=config.DEFAULT_ROOT, exclusion=None, sort_entries=False, webhook_url=None):
    event_handler = ManifestMonitorHandler(root, exclusion, sort_entries, webhook_url)
    print(f"🛰️ Monitoring started on folder: {root}")
    print(f"🔐 Baseline manifest checksum: {event_handler.checksum}")

    observer = Observer()
    observer.schedule(event_handler, path=str(root), recursive=True)
    observer.start()

    try:
        while True:
            time.sleep(config.WATCH_INTERVAL)
    except KeyboardInterrupt:
        observer.stop()
    observer.join()
