# tests/test_storage.py
import pytest
from botocore.stub import ANY

from dealership.config import StorageConfig
from dealership.storage import ImageFile, ImageRejected, ImageStorage, StorageError


def jpeg(name="car.jpg", size=10):
    return ImageFile(filename=name, content_type="image/jpeg", content=b"x" * size)


def test_upload_puts_object_and_returns_public_url(settings, s3_stub):
    client, stubber = s3_stub
    stubber.add_response(
        "put_object", {},
        {"Bucket": "car-images", "Key": ANY, "Body": b"x" * 10, "ContentType": "image/jpeg"},
    )
    storage = ImageStorage(settings.storage, client=client)
    url = storage.upload(7, jpeg())
    assert url.startswith("https://cdn.example.com/car-images/7/")
    assert url.endswith(".jpg")
    stubber.assert_no_pending_responses()


def test_rejects_non_images_and_large_files(settings):
    storage = ImageStorage(settings.storage, client=object())
    with pytest.raises(ImageRejected, match="only image files"):
        storage.validate(ImageFile(filename="notes.pdf", content_type="application/pdf", content=b"%PDF"))
    with pytest.raises(ImageRejected) as exc:
        storage.validate(jpeg(size=settings.storage.max_image_bytes + 1))
    assert exc.value.status_code == 413


def test_content_type_guessed_from_filename(settings):
    storage = ImageStorage(settings.storage, client=object())
    assert storage.validate(ImageFile(filename="car.png", content_type=None, content=b"x")) == "image/png"


def test_upload_many_keeps_first_five_valid_files(settings, s3_stub):
    client, stubber = s3_stub
    for _ in range(5):
        stubber.add_response("put_object", {}, {"Bucket": "car-images", "Key": ANY, "Body": ANY,
                                               "ContentType": "image/jpeg"})
    storage = ImageStorage(settings.storage, client=client)
    urls, rejected = storage.upload_many(1, [jpeg(f"{i}.jpg") for i in range(7)])
    assert len(urls) == 5
    assert rejected == []
    stubber.assert_no_pending_responses()


def test_upload_many_drops_invalid_files_and_keeps_the_rest(settings, s3_stub):
    client, stubber = s3_stub
    stubber.add_response("put_object", {}, {"Bucket": "car-images", "Key": ANY, "Body": ANY,
                                           "ContentType": "image/jpeg"})
    storage = ImageStorage(settings.storage, client=client)
    urls, rejected = storage.upload_many(1, [ImageFile("notes.txt", "text/plain", b"x"), jpeg()])
    assert len(urls) == 1
    [(name, reason)] = rejected
    assert name == "notes.txt"
    assert str(reason) == "Please select only image files."
    stubber.assert_no_pending_responses()


def test_upload_failure_raises_storage_error(settings, s3_stub):
    client, stubber = s3_stub
    stubber.add_client_error("put_object", service_error_code="AccessDenied", http_status_code=403)
    storage = ImageStorage(settings.storage, client=client)
    with pytest.raises(StorageError):
        storage.upload(1, jpeg())


def test_public_url_variants():
    assert StorageConfig(bucket="b", region="eu-west-1", public_base_url=None, endpoint_url=None) \
        .public_url("1/a.jpg") == "https://b.s3.eu-west-1.amazonaws.com/1/a.jpg"
    assert StorageConfig(bucket="b", endpoint_url="http://minio:9000/", public_base_url=None) \
        .public_url("1/a.jpg") == "http://minio:9000/b/1/a.jpg"
