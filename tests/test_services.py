"""Tests for medialib services."""
import pytest
from unittest.mock import AsyncMock, Mock

from medialib.errors import CollisionError, NetworkError, ValidationError
from medialib.models import FileObject, FileUpload, FolderEntry, MediaConfig, SortBy
from medialib.services.folders import PLACEHOLDER_PNG, FolderCreator, sentinel_path
from medialib.services.listing import ListingService, parse_entry, partition
from medialib.services.uploads import UploadCoordinator, upload_notifications
from medialib.services.urls import UrlResolver


def _png(name: str) -> FileUpload:
    return FileUpload(name=name, data=b"png-bytes", content_type="image/png")


class TestListingService:
    @pytest.fixture
    def mock_store(self):
        store = Mock()
        store.list = AsyncMock(return_value=[
            {"name": "banners", "id": None, "created_at": None, "metadata": None},
            {"name": "banners", "id": None, "created_at": None, "metadata": None},
            {"name": ".keep", "id": "k1", "created_at": "t0", "metadata": {}},
            {"name": "mug.png", "id": "f1", "created_at": "t1", "metadata": {"size": 10}},
            {"name": "tee.png", "id": "f2", "created_at": "t2", "metadata": None},
        ])
        return store

    def test_parse_entry_tags_variants(self):
        assert parse_entry("shop", {"name": "sub", "id": None}) == FolderEntry(name="sub")
        entry = parse_entry("shop", {"name": "a.png", "id": "x1"})
        assert isinstance(entry, FileObject)
        assert entry.path == "shop/a.png"

    @pytest.mark.asyncio
    async def test_list_partitions_folders_and_files(self, mock_store):
        service = ListingService(mock_store, limit=100)

        listing = await service.list("products")

        mock_store.list.assert_awaited_once_with("products", limit=100, sort_by=SortBy("name", "asc"))
        assert listing.folders == ("banners",)
        assert [f.name for f in listing.files] == ["mug.png", "tee.png"]
        assert [f.path for f in listing.files] == ["products/mug.png", "products/tee.png"]
        assert listing.files[0].metadata == {"size": 10}
        assert listing.files[1].metadata == {}

    def test_partition_each_row_accounted_once(self):
        entries = [FolderEntry("a"), FileObject("x.png", "1", "x.png"), FolderEntry("b")]
        listing = partition("", entries)
        assert listing.folders == ("a", "b")
        assert len(listing.files) == 1

    @pytest.mark.asyncio
    async def test_list_error_reports_and_returns_empty(self, mock_store):
        mock_store.list.side_effect = NetworkError("connection reset")
        errors = []
        service = ListingService(mock_store)

        listing = await service.list("products", on_error=errors.append)

        assert listing.is_empty
        assert listing.path == "products"
        assert len(errors) == 1
        assert isinstance(errors[0], NetworkError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("row", [{"id": "x1"}, "mug.png", {"name": None, "id": "x1"}])
    async def test_malformed_row_reports_and_returns_empty(self, mock_store, row):
        mock_store.list.return_value = [{"name": "ok.png", "id": "f1"}, row]
        errors = []
        service = ListingService(mock_store)

        listing = await service.list("products", on_error=errors.append)

        assert listing.is_empty
        assert len(errors) == 1
        assert isinstance(errors[0], NetworkError)

    @pytest.mark.asyncio
    async def test_list_rejects_unnormalized_path(self, mock_store):
        service = ListingService(mock_store)
        with pytest.raises(ValidationError):
            await service.list("/products/")
        mock_store.list.assert_not_awaited()


class TestFolderCreator:
    @pytest.mark.asyncio
    async def test_create_writes_sentinel_without_overwrite(self):
        store = Mock()
        store.upload = AsyncMock(return_value="media/products/new/.keep")
        creator = FolderCreator(store)

        key = await creator.create("products", "  new  ")

        assert key == "products/new/.keep"
        store.upload.assert_awaited_once_with(
            "products/new/.keep",
            PLACEHOLDER_PNG,
            content_type="image/png",
            cache_control="3600",
            upsert=False,
        )

    @pytest.mark.asyncio
    async def test_blank_name_never_reaches_store(self):
        store = Mock()
        store.upload = AsyncMock()
        creator = FolderCreator(store)

        with pytest.raises(ValidationError):
            await creator.create("", "   ")
        store.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_second_create_collides_and_listing_has_one_folder(self, config, make_store):
        store = make_store()
        creator = FolderCreator(store, config)

        await creator.create("", "X")
        with pytest.raises(CollisionError):
            await creator.create("", "X")

        listing = await ListingService(store).list("")
        assert listing.folders == ("X",)

    @pytest.mark.asyncio
    async def test_exist_ok_accepts_existing_folder(self, make_store):
        store = make_store(keys=["X/.keep"])
        creator = FolderCreator(store)

        assert await creator.create("", "X", exist_ok=True) == "X/.keep"

    def test_sentinel_path(self):
        assert sentinel_path("", "a") == "a/.keep"
        assert sentinel_path("a", "b") == "a/b/.keep"

    def test_placeholder_is_png(self):
        assert PLACEHOLDER_PNG.startswith(b"\x89PNG\r\n\x1a\n")
        assert PLACEHOLDER_PNG.endswith(b"IEND\xaeB`\x82")


class TestUploadCoordinator:
    @pytest.mark.asyncio
    async def test_partial_success_refreshes_once(self, make_store):
        store = make_store(keys=["products/b.png"])
        coordinator = UploadCoordinator(store)
        refresh = AsyncMock()
        before = len((await ListingService(store).list("products")).files)

        results = await coordinator.upload_all(
            "products",
            [_png("a.png"), _png("b.png"), _png("c.png")],
            refresh=refresh,
        )

        assert [r.success for r in results] == [True, False, True]
        assert results[1].collided is True
        assert results[1].filename == "b.png"
        refresh.assert_awaited_once()
        after = len((await ListingService(store).list("products")).files)
        assert after - before == 2

    @pytest.mark.asyncio
    async def test_uploads_are_sequential_and_never_overwrite(self, make_store):
        store = make_store()
        coordinator = UploadCoordinator(store)

        await coordinator.upload_all("", [_png("1.png"), _png("2.png"), _png("3.png")])

        assert [c["path"] for c in store.upload_calls] == ["1.png", "2.png", "3.png"]
        assert all(c["upsert"] is False for c in store.upload_calls)

    @pytest.mark.asyncio
    async def test_network_failure_does_not_abort_batch(self, make_store):
        store = make_store()
        store.upload_errors["a.png"] = NetworkError("timeout")
        coordinator = UploadCoordinator(store)

        results = await coordinator.upload_all("", [_png("a.png"), _png("b.png")])

        assert results[0].error_kind == "NetworkError"
        assert results[1].success is True

    @pytest.mark.asyncio
    async def test_bad_filename_fails_only_that_file(self, make_store):
        coordinator = UploadCoordinator(make_store())

        results = await coordinator.upload_all("", [_png("a/b.png"), _png("ok.png")])

        assert results[0].error_kind == "ValidationError"
        assert results[1].success is True

    @pytest.mark.asyncio
    async def test_empty_selection_is_rejected(self):
        store = Mock()
        store.upload = AsyncMock()
        refresh = AsyncMock()

        with pytest.raises(ValidationError):
            await UploadCoordinator(store).upload_all("", [], refresh=refresh)
        store.upload.assert_not_awaited()
        refresh.assert_not_awaited()

    def test_upload_notifications(self):
        from medialib.models import UploadResult

        results = [
            UploadResult.ok("a.png", "a.png"),
            UploadResult.fail("b.png", "exists", error_kind="CollisionError"),
        ]
        notifications = upload_notifications(results)

        assert notifications[0].is_error
        assert notifications[0].title == "Error uploading b.png"
        assert notifications[-1].description == "Uploaded 1 of 2 files"


class TestUrlResolver:
    def test_resolve_is_plain_concatenation(self, config):
        resolver = UrlResolver(config)
        assert resolver.resolve("products/mug.png") == (
            "https://demo.supabase.co/storage/v1/object/public/media/products/mug.png"
        )

    def test_resolve_asset(self):
        resolver = UrlResolver(
            MediaConfig(base_url="https://demo.supabase.co"),
            static_assets=["/assets/products/mug-abc123.png", "/assets/products/tee.png"],
        )
        assert resolver.resolve_asset(None) == ""
        assert resolver.resolve_asset("https://cdn.example.com/x.png") == "https://cdn.example.com/x.png"
        assert resolver.resolve_asset("/static/x.png") == "/static/x.png"
        assert resolver.resolve_asset("products/tee.png") == "/assets/products/tee.png"
        assert resolver.resolve_asset("unknown.png") == "unknown.png"
