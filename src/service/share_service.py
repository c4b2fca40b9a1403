"""공유 페이지 (/share/{id}).

SNS 미리보기(Open Graph, Twitter card)용 메타 태그와 이미지 한 장을 보여준다.
"""

from html import escape

from loguru import logger
from sqlmodel import Session

from core.config import Settings
from core.exceptions import RecordNotFound, StorageError
from model.image import ImageJob
from storage.base import ObjectStorage, object_name_from_url

SHARE_TITLE = "AI-Generated Hug Image"
SHARE_DESCRIPTION = (
    "Check out this beautiful AI-generated hug image created with Gemini Nano Banana!"
)

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{title}</title>
  <meta name="description" content="{description}">
  <meta property="og:type" content="website">
  <meta property="og:title" content="{title}">
  <meta property="og:description" content="{description}">
  <meta property="og:url" content="{page_url}">
  <meta property="og:image" content="{image_url}">
  <meta property="og:image:width" content="1024">
  <meta property="og:image:height" content="1024">
  <meta property="og:image:alt" content="{title}">
  <meta name="twitter:card" content="summary_large_image">
  <meta name="twitter:title" content="{title}">
  <meta name="twitter:description" content="{description}">
  <meta name="twitter:image" content="{image_url}">
</head>
<body>
  <main>
    <h1>{title}</h1>
    <img src="{image_url}" alt="AI-Generated Hug" width="1024" height="1024">
    <p><a href="{image_url}" download="hug-image.png">Download</a> · <a href="/">Create Your Own</a></p>
    <p>Created on {created}</p>
  </main>
</body>
</html>
"""

NOT_FOUND_PAGE = """<!DOCTYPE html>
<html lang="en"><head><meta charset="utf-8"><title>Image Not Found</title></head>
<body><h1>Image Not Found</h1><p><a href="/">Create your own hug image</a></p></body>
</html>
"""


def get_shared_image(
    record_id: int, session: Session, storage: ObjectStorage, settings: Settings
) -> tuple[ImageJob, str]:
    record = session.get(ImageJob, record_id)
    if record is None or not record.image_url:
        raise RecordNotFound(f"Image {record_id} not found")

    image_url = ""
    try:
        image_url = storage.create_signed_url(
            settings.IMAGE_BUCKET, object_name_from_url(record.image_url)
        )
    except StorageError as e:
        logger.error(f"Failed to sign shared image {record_id}: {e}")
    return record, image_url


def render_share_page(record: ImageJob, image_url: str, page_url: str) -> str:
    return PAGE_TEMPLATE.format(
        title=escape(SHARE_TITLE),
        description=escape(SHARE_DESCRIPTION),
        page_url=escape(page_url),
        image_url=escape(image_url),
        created=escape(f"{record.created_at:%B %d, %Y}"),
    )
