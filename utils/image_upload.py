#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Image upload service

Images arrive as base64 strings (optionally data URLs). They are checked with
Pillow and stored on a GitHub repository through the contents API. Without a
GitHub token the local upload folder is used instead.
"""

import os
import io
import base64
import binascii
import logging

import requests
from PIL import Image, UnidentifiedImageError
from flask import current_app
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

FORMAT_EXTENSIONS = {
    'JPEG': 'jpg',
    'PNG': 'png',
    'GIF': 'gif',
    'WEBP': 'webp',
}


class ImageUploadError(Exception):
    """The image could not be decoded, validated or stored."""


def decode_image(image):
    """Decode a base64 string or data URL into raw bytes"""
    if isinstance(image, (bytes, bytearray)):
        return bytes(image)
    if not isinstance(image, str) or not image.strip():
        raise ImageUploadError('Image data is empty')

    data = image.strip()
    if data.startswith('data:'):
        _, _, data = data.partition(',')
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageUploadError(f'Image is not valid base64: {e}')


def inspect_image(content, allowed_formats):
    """Return the Pillow format name of the image, validating it"""
    try:
        with Image.open(io.BytesIO(content)) as image:
            image_format = image.format
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ImageUploadError(f'Unreadable image: {e}')

    if image_format not in allowed_formats:
        raise ImageUploadError(f'Unsupported image format: {image_format}')
    return image_format


class ImageUploader:
    """Stores images and returns their public URL"""

    def _github_configured(self, config):
        return bool(config.get('GITHUB_TOKEN') and config.get('GITHUB_REPO'))

    def _upload_to_github(self, config, path, content):
        repo = config['GITHUB_REPO']
        branch = config.get('GITHUB_BRANCH') or 'main'
        url = f"{config.get('GITHUB_API_URL', 'https://api.github.com')}/repos/{repo}/contents/{path}"

        response = requests.put(
            url,
            json={
                'message': f'Upload {path}',
                'content': base64.b64encode(content).decode('ascii'),
                'branch': branch,
            },
            headers={
                'Authorization': f"Bearer {config['GITHUB_TOKEN']}",
                'Accept': 'application/vnd.github+json',
            },
            timeout=config.get('IMAGE_UPLOAD_TIMEOUT', 15),
        )
        if response.status_code not in (200, 201):
            raise ImageUploadError(f'GitHub upload failed with status {response.status_code}: {response.text[:200]}')

        download_url = (response.json().get('content') or {}).get('download_url')
        return download_url or f"https://raw.githubusercontent.com/{repo}/{branch}/{path}"

    def _save_locally(self, config, folder, file_name, content):
        target_dir = os.path.join(config['UPLOAD_FOLDER'], folder)
        os.makedirs(target_dir, exist_ok=True)
        with open(os.path.join(target_dir, file_name), 'wb') as f:
            f.write(content)
        return f"/uploads/{folder}/{file_name}"

    def upload(self, file_name, image, folder='images'):
        """Upload an image

        Args:
            file_name: base name without extension
            image: base64 string / data URL / bytes
            folder: sub folder on the content host

        Returns:
            dict with `success` and either `url` or `error`
        """
        config = current_app.config
        try:
            content = decode_image(image)
            image_format = inspect_image(content, config.get('ALLOWED_IMAGE_FORMATS', FORMAT_EXTENSIONS.keys()))
            name = secure_filename(f"{file_name}.{FORMAT_EXTENSIONS.get(image_format, 'jpg')}")
            folder = secure_filename(folder) or 'images'

            if self._github_configured(config):
                url = self._upload_to_github(config, f"{folder}/{name}", content)
            else:
                url = self._save_locally(config, folder, name, content)

            logger.info(f"Uploaded image {folder}/{name}")
            return {'success': True, 'url': url}

        except (ImageUploadError, requests.RequestException, OSError) as e:
            logger.error(f"Image upload failed for {file_name}: {e}")
            return {'success': False, 'error': str(e)}


# Singleton instance
image_uploader = ImageUploader()
