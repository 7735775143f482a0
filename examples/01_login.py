"""
Authorize the application and store the token
"""
import asyncio
import os

from onedrivepy import OneDriveClient

CLIENT_ID = os.environ["ONEDRIVE_CLIENT_ID"]
CLIENT_SECRET = os.environ["ONEDRIVE_CLIENT_SECRET"]


async def main():
    async with OneDriveClient(CLIENT_ID, storage="session") as onedrive:

        if not onedrive.is_logged_in:
            url = onedrive.get_login_url(
                ['files.readwrite', 'offline_access'],
                'http://localhost:7000/'
            )
            print(f"Open: {url}")
            code = input("Code from the redirect URI: ")
            await onedrive.obtain_access_token(CLIENT_SECRET, code)

        # Tokens last one hour, renew when close to expiry
        print(f"Token status: {onedrive.access_token_status().name}")
        if onedrive.token_expire() < 300:
            await onedrive.renew_access_token(CLIENT_SECRET)

        drive = await onedrive.get_my_drive()
        print(f"Drive: {drive.name} ({drive.drive_type})")
        print(f"Free: {drive.quota.remaining / 1024 ** 3:.2f} GB")


if __name__ == "__main__":
    asyncio.run(main())
