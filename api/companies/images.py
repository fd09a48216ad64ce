import time

from utils.image_upload import image_uploader

from . import logger


def upload_company_image(company_id, image):
    """Upload a company logo; None when the upload fails"""
    file_name = f"company_{company_id}_{int(time.time() * 1000)}"
    result = image_uploader.upload(file_name, image, 'companies')
    if not result.get('success'):
        logger.warning(f"Image upload failed for {company_id}, keeping no image: {result.get('error')}")
        return None
    return result['url']
