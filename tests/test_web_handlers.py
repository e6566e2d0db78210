import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import aiojobs
import pytest
import structlog

from image_fusion.app import setup_aiohttp_app
from image_fusion.data.settings import Settings, WebConfig
from image_fusion.web_handlers.result_image import result_filename
from tests.conftest import make_png

MISSING_INPUTS = "Please upload both images and select an action."


def image_form(data: bytes, content_type: str = "image/png") -> aiohttp.FormData:
    form = aiohttp.FormData()
    form.add_field("image", data, filename="person.png", content_type=content_type)
    return form


async def get_state(client) -> dict:
    resp = await client.get("/api/state")
    assert resp.status == 200
    return await resp.json()


async def wait_until_settled(client, attempts: int = 200) -> dict:
    for _ in range(attempts):
        state = await get_state(client)
        if state["outcome"]["kind"] != "loading":
            return state
        await asyncio.sleep(0.01)
    raise AssertionError("Fusion request never settled")


async def upload_both(client, first: bytes, second: bytes) -> None:
    for slot, data in (("1", first), ("2", second)):
        resp = await client.post(f"/slots/{slot}", data=image_form(data), allow_redirects=False)
        assert resp.status == 303
        assert resp.headers["Location"] == "/"


async def test_index_renders_and_sets_session_cookie(web_client):
    resp = await web_client.get("/")

    assert resp.status == 200
    assert "AI Image Fusion" in await resp.text()
    assert "fusion_session" in resp.cookies


async def test_initial_state(web_client):
    state = await get_state(web_client)

    assert state == {
        "outcome": {"kind": "idle"},
        "slots": {"1": False, "2": False},
        "slot_errors": {},
        "action": "shaking hands",
    }


async def test_full_fusion_flow(web_client, fake_ai_client, png_bytes, other_png_bytes, result_png_bytes):
    await upload_both(web_client, png_bytes, other_png_bytes)

    resp = await web_client.post(
        "/fuse", data={"action": "hugging each other"}, allow_redirects=False
    )
    assert resp.status == 303

    state = await wait_until_settled(web_client)
    assert state["outcome"]["kind"] == "success"
    assert state["outcome"]["image_data_url"].startswith("data:image/png;base64,")
    assert state["action"] == "hugging each other"

    kwargs = fake_ai_client.models.generate_content.await_args.kwargs
    parts = kwargs["contents"][0].parts
    assert parts[0].inline_data.data == png_bytes
    assert parts[1].inline_data.data == other_png_bytes
    assert "hugging each other" in parts[2].text

    resp = await web_client.get("/result")
    assert resp.status == 200
    assert resp.content_type == "image/png"
    assert await resp.read() == result_png_bytes

    page = await (await web_client.get("/")).text()
    assert 'alt="Generated fusion"' in page


async def test_fuse_without_images_fails_without_calling_the_model(web_client, fake_ai_client):
    resp = await web_client.post("/fuse", data={}, allow_redirects=False)

    assert resp.status == 303
    state = await get_state(web_client)
    assert state["outcome"] == {"kind": "failure", "message": MISSING_INPUTS}
    fake_ai_client.models.generate_content.assert_not_called()


async def test_fuse_with_empty_action_fails(web_client, png_bytes, other_png_bytes):
    await upload_both(web_client, png_bytes, other_png_bytes)

    await web_client.post("/fuse", data={"action": ""}, allow_redirects=False)

    state = await get_state(web_client)
    assert state["outcome"] == {"kind": "failure", "message": MISSING_INPUTS}
    assert state["action"] is None


async def test_fuse_with_unknown_action_is_rejected(web_client):
    resp = await web_client.post("/fuse", data={"action": "dancing"}, allow_redirects=False)

    assert resp.status == 400


async def test_upload_to_unknown_slot(web_client, png_bytes):
    resp = await web_client.post("/slots/3", data=image_form(png_bytes), allow_redirects=False)

    assert resp.status == 404


async def test_upload_without_file(web_client):
    resp = await web_client.post("/slots/1", data={"image": "not a file"}, allow_redirects=False)

    assert resp.status == 400


async def test_result_is_missing_before_success(web_client):
    resp = await web_client.get("/result")

    assert resp.status == 404


async def test_sessions_are_isolated(aiohttp_client, settings, fake_ai_client, png_bytes):
    app = await setup_aiohttp_app(settings, ai_client_factory=lambda _s: fake_ai_client)
    alice = await aiohttp_client(app)
    resp = await alice.post("/slots/1", data=image_form(png_bytes), allow_redirects=False)
    assert resp.status == 303

    alice_state = await get_state(alice)
    alice.session.cookie_jar.clear()
    stranger_state = await get_state(alice)

    assert alice_state["slots"]["1"] is True
    assert stranger_state["slots"]["1"] is False
    assert len(app["session_storage"]) == 2


class TestInFlight:

    @pytest.fixture
    def release(self):
        return asyncio.Event()

    @pytest.fixture
    def slow_ai_client(self, release, image_response):
        async def generate_content(**_kwargs):
            await release.wait()
            return image_response

        client = MagicMock()
        client.models.generate_content = AsyncMock(side_effect=generate_content)
        return client

    @pytest.fixture
    async def slow_client(self, aiohttp_client, settings, slow_ai_client):
        app = await setup_aiohttp_app(settings, ai_client_factory=lambda _s: slow_ai_client)
        return await aiohttp_client(app)

    async def test_second_dispatch_conflicts_while_loading(
        self, slow_client, slow_ai_client, release, png_bytes, other_png_bytes
    ):
        await upload_both(slow_client, png_bytes, other_png_bytes)
        await slow_client.post("/fuse", data={}, allow_redirects=False)

        state = await get_state(slow_client)
        assert state["outcome"] == {"kind": "loading"}
        page = await (await slow_client.get("/")).text()
        assert "Generating..." in page
        assert 'http-equiv="refresh"' in page

        resp = await slow_client.post("/fuse", data={}, allow_redirects=False)
        assert resp.status == 409

        release.set()
        state = await wait_until_settled(slow_client)
        assert state["outcome"]["kind"] == "success"
        assert slow_ai_client.models.generate_content.await_count == 1


async def test_missing_key_is_reported_on_dispatch(
    aiohttp_client, settings_without_key, png_bytes, other_png_bytes
):
    factory = MagicMock()
    app = await setup_aiohttp_app(settings_without_key, ai_client_factory=factory)
    client = await aiohttp_client(app)
    await upload_both(client, png_bytes, other_png_bytes)

    await client.post("/fuse", data={}, allow_redirects=False)

    state = await get_state(client)
    assert state["outcome"]["kind"] == "failure"
    assert "GOOGLE__API_KEY" in state["outcome"]["message"]
    factory.assert_not_called()


async def test_every_request_is_logged_with_request_context(aiohttp_client, settings, fake_ai_client):
    app = await setup_aiohttp_app(settings, ai_client_factory=lambda _s: fake_ai_client)
    handled = []
    logger = MagicMock()
    logger.info.side_effect = lambda event, **kw: handled.append(
        (event, kw, structlog.contextvars.get_contextvars())
    )
    app["logger"] = logger
    client = await aiohttp_client(app)

    await client.get("/")
    await client.post("/slots/3", data={}, allow_redirects=False)

    requests = [(kw, ctx) for event, kw, ctx in handled if event == "Handled request"]
    assert [kw["status"] for kw, _ in requests] == [200, 404]
    assert [(ctx["method"], ctx["path"]) for _, ctx in requests] == [
        ("GET", "/"),
        ("POST", "/slots/3"),
    ]
    assert all(ctx["request_id"] for _, ctx in requests)


async def test_cookieless_clients_cannot_grow_the_session_store(aiohttp_client, fake_ai_client):
    settings = Settings(web=WebConfig(max_sessions=5))
    app = await setup_aiohttp_app(settings, ai_client_factory=lambda _s: fake_ai_client)
    client = await aiohttp_client(app)

    for _ in range(50):
        client.session.cookie_jar.clear()
        await get_state(client)

    assert len(app["session_storage"]) == 5


async def test_result_download_name_has_an_extension(web_client, png_bytes, other_png_bytes):
    await upload_both(web_client, png_bytes, other_png_bytes)
    await web_client.post("/fuse", data={}, allow_redirects=False)
    await wait_until_settled(web_client)

    resp = await web_client.get("/result")

    assert resp.headers["Content-Disposition"] == 'attachment; filename="fusion.png"'


async def test_queued_request_keeps_the_images_it_was_dispatched_with(
    aiohttp_client, settings, fake_ai_client, png_bytes, other_png_bytes
):
    app = await setup_aiohttp_app(settings, ai_client_factory=lambda _s: fake_ai_client)
    await app["scheduler"].close()
    scheduler = aiojobs.Scheduler(limit=1)
    app["scheduler"] = scheduler
    client = await aiohttp_client(app)

    busy = asyncio.Event()
    await scheduler.spawn(busy.wait())
    await upload_both(client, png_bytes, other_png_bytes)
    await client.post("/fuse", data={"action": "saluting each other"}, allow_redirects=False)
    assert scheduler.pending_count == 1

    resp = await client.post(
        "/slots/1", data=image_form(make_png("yellow")), allow_redirects=False
    )
    assert resp.status == 303
    resp = await client.post(
        "/fuse", data={"action": "hugging each other"}, allow_redirects=False
    )
    assert resp.status == 409

    busy.set()
    state = await wait_until_settled(client)

    assert state["outcome"]["kind"] == "success"
    fake_ai_client.models.generate_content.assert_awaited_once()
    parts = fake_ai_client.models.generate_content.await_args.kwargs["contents"][0].parts
    assert parts[0].inline_data.data == png_bytes
    assert parts[1].inline_data.data == other_png_bytes
    assert "saluting each other" in parts[2].text


@pytest.mark.parametrize(
    ("mime_type", "expected"),
    [("image/png", "fusion.png"), ("image/jpeg", "fusion.jpg"), ("x-unknown/zzz", "fusion.bin")],
)
def test_result_filename(mime_type, expected):
    assert result_filename(mime_type) == expected
