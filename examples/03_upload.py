"""
Upload large files through upload sessions
"""
import asyncio
import os
from pathlib import Path

from onedrivepy import OneDriveClient


async def main():
    async with OneDriveClient(os.environ["ONEDRIVE_CLIENT_ID"], storage="session") as onedrive:
        root = await onedrive.get_root()

        # One call: create the session and upload all ranges
        item = await root.upload_large("video.mp4", Path("video.mp4"))
        print(f"Uploaded: {item.name} ({item.size:,} bytes)")

        # Larger ranges mean fewer requests (rounded down to a multiple of 320 KiB)
        def on_progress(progress):
            print(f"Progress: {progress.percentage:.1f}% ({progress.uploaded_ranges}/{progress.total_ranges})")

        session = await root.start_upload(
            "backup.zip",
            Path("backup.zip"),
            content_type="application/zip",
            range_size=10 * 1024 * 1024,
            conflict_behavior="replace",
            progress_callback=on_progress
        )
        print(f"Session expires at {session.expiration_time}")

        # Failures reported as values instead of exceptions
        result = await session.complete_with_result()
        if result.ok:
            print(f"Uploaded: {result.item.id}")
        elif result.retryable:
            print(f"Network failure, try a new session: {result.detail}")
        else:
            print(f"Upload failed ({result.error_kind.value}): {result.detail}")

        # Streams work too, as long as their size is known
        with open("data.csv", "rb") as f:
            session = await root.start_upload("data.csv", f, content_type="text/csv")
            item = await session.complete()
            print(f"Uploaded: {item.name}")


if __name__ == "__main__":
    asyncio.run(main())
