"""
Browse and organize files
"""
import asyncio
import os

from onedrivepy import OneDriveClient


async def main():
    async with OneDriveClient(os.environ["ONEDRIVE_CLIENT_ID"], storage="session") as onedrive:
        root = await onedrive.get_root()

        for child in await root.children():
            kind = "DIR " if child.is_folder else "FILE"
            print(f"{kind} {child.name} {child.size or 0:,}")

        # Create, rename, move
        reports = await root.create_folder("Reports", conflict_behavior="rename")
        notes = await root.upload("notes.txt", "Meeting notes", content_type="text/plain")
        await notes.rename("2024-notes.txt")
        await notes.move(reports)

        # Copies run in the background; poll the returned URL for progress
        monitor_url = await notes.copy(root, name="notes-copy.txt")
        print(f"Copy progress: {monitor_url}")

        # Lookups
        docs = await onedrive.get_special_folder("documents")
        item = await onedrive.get_drive_item_by_path("/Reports/2024-notes.txt")
        print(docs.name, item.id)
        print(await item.download())

        for recent in await onedrive.get_recent():
            print(f"Recent: {recent.name}")

        await reports.delete()


if __name__ == "__main__":
    asyncio.run(main())
