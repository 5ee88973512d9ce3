from intranet.config import settings


def _client_url() -> str:
    return settings.CLIENT_URL.rstrip("/")


def wall_post_url(organization: str, post_id: int) -> str:
    return f"{_client_url()}/{organization}/Wall/Post/{post_id}"


def event_url(organization: str, event_id: str) -> str:
    return f"{_client_url()}/{organization}/Events/Event/{event_id}"


def project_url(organization: str, project_id: int) -> str:
    return f"{_client_url()}/{organization}/Projects/Project/{project_id}"


def user_notification_settings_url(organization: str) -> str:
    return f"{_client_url()}/{organization}/Settings/Notifications"


def picture_url(organization: str, picture_id: str | None) -> str | None:
    if not picture_id:
        return None
    return f"{_client_url()}/storage/{organization}/{picture_id}"
