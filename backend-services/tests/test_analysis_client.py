import json

import httpx
import pytest
from httpx import ASGITransport

from client.analysis_client import AnalysisClient
from client.result_normalizer import AnalysisFailure, AnalysisSuccess
from models.request_payload_model import RequestPayloadModel
from conftest import gemini_body


class _GatewayRecorder:

    def __init__(self, status_code=200, json_body=None, text_body=None, exc=None):
        self.status_code = status_code
        self.json_body = json_body if json_body is not None else gemini_body('plain answer')
        self.text_body = text_body
        self.exc = exc
        self.payloads = []
        self.urls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.urls.append(str(request.url))
        self.payloads.append(json.loads(request.content or b'{}'))
        if self.exc is not None:
            raise self.exc
        if self.text_body is not None:
            return httpx.Response(self.status_code, text=self.text_body)
        return httpx.Response(self.status_code, json=self.json_body)


def _client(recorder):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return AnalysisClient('http://gateway.test/', http_client=http_client)


@pytest.mark.asyncio
async def test_text_posts_to_gateway_path():
    recorder = _GatewayRecorder()
    async with _client(recorder) as client:
        result = await client.analyze_text('hello world')
    assert recorder.urls == ['http://gateway.test/gateway']
    assert recorder.payloads == [{'text': 'hello world'}]
    assert result.summary == 'plain answer...'


@pytest.mark.asyncio
async def test_image_prefix_is_stripped_and_mime_kept():
    recorder = _GatewayRecorder()
    async with _client(recorder) as client:
        await client.analyze_image('data:image/png;base64,AAAA')
    payload = recorder.payloads[0]
    assert payload['image'] == 'AAAA'
    assert payload['imageMimeType'] == 'image/png'
    assert payload['text'] == '请分析这张图片的内容'


@pytest.mark.asyncio
async def test_image_without_prefix_omits_mime_type():
    recorder = _GatewayRecorder()
    async with _client(recorder) as client:
        await client.analyze_image('BBBB')
    payload = recorder.payloads[0]
    assert payload['image'] == 'BBBB'
    assert 'imageMimeType' not in payload


@pytest.mark.asyncio
async def test_document_audio_and_video_files_share_file_payload():
    recorder = _GatewayRecorder()
    async with _client(recorder) as client:
        await client.analyze_document('data:application/pdf;base64,PDF0', 'application/pdf')
        await client.analyze_audio_file('data:audio/mpeg;base64,MP30', 'audio/mpeg')
        await client.analyze_video_file('MP40', 'video/mp4')
    assert [p['file'] for p in recorder.payloads] == [
        {'base64': 'PDF0', 'mimeType': 'application/pdf'},
        {'base64': 'MP30', 'mimeType': 'audio/mpeg'},
        {'base64': 'MP40', 'mimeType': 'video/mp4'},
    ]
    assert all(p['text'] == '请分析这份文档的内容' for p in recorder.payloads)


@pytest.mark.asyncio
async def test_urls_are_embedded_in_instructions():
    recorder = _GatewayRecorder()
    async with _client(recorder) as client:
        await client.analyze_web_url('https://example.com/a')
        await client.analyze_video_url('https://video.example.com/v')
    assert recorder.payloads == [
        {'text': '请分析此网页内容：https://example.com/a'},
        {'text': '请分析此视频内容：https://video.example.com/v'},
    ]


@pytest.mark.asyncio
async def test_structured_answer_is_parsed():
    body = gemini_body('```json\n{"summary": "S", "keyPoints": ["k"], "conclusion": "C"}\n```')
    async with _client(_GatewayRecorder(json_body=body)) as client:
        result = await client.analyze_text('x')
    assert result.summary == 'S'
    assert result.key_points == ['k']
    assert result.conclusion == 'C'


@pytest.mark.asyncio
async def test_rate_limit_envelope_resolves_to_quota_result():
    recorder = _GatewayRecorder(
        status_code=429, json_body={'error': 'RATE_LIMIT', 'message': 'Gemini API 额度超限'}
    )
    async with _client(recorder) as client:
        outcome = await client.analyze(RequestPayloadModel(text='x'))
    assert isinstance(outcome, AnalysisFailure)
    assert outcome.result.summary == '错误: API 额度超限'


@pytest.mark.asyncio
async def test_connection_failure_never_raises():
    recorder = _GatewayRecorder(exc=httpx.ConnectError('connection refused'))
    async with _client(recorder) as client:
        result = await client.analyze_text('x')
    assert result.summary == '错误: connection refused'
    assert result.conclusion == '请求失败'


@pytest.mark.asyncio
async def test_non_json_gateway_response_never_raises():
    recorder = _GatewayRecorder(status_code=502, text_body='<html>Bad Gateway</html>')
    async with _client(recorder) as client:
        outcome = await client.analyze(RequestPayloadModel(text='x'))
    assert isinstance(outcome, AnalysisFailure)
    assert outcome.result.summary.startswith('错误: ')


@pytest.mark.asyncio
async def test_end_to_end_through_gateway_app(gateway_service, upstream):
    from insight import insight

    original = insight.state.gateway_service
    insight.state.gateway_service = gateway_service
    try:
        http_client = httpx.AsyncClient(transport=ASGITransport(app=insight), base_url='http://testserver')
        async with AnalysisClient('http://testserver', http_client=http_client) as client:
            outcome = await client.analyze(RequestPayloadModel(text='hello'))
            result = await client.analyze_text('hello')
        await http_client.aclose()
    finally:
        insight.state.gateway_service = original
    assert isinstance(outcome, AnalysisSuccess)
    assert result.summary
    assert result.detailed_analysis == 'plain answer'
    assert upstream.calls == 2


@pytest.mark.asyncio
async def test_end_to_end_upstream_quota(gateway_service, upstream):
    from insight import insight

    upstream.status_code = 429
    upstream.json_body = {'error': {'code': 429, 'message': 'Resource has been exhausted'}}
    original = insight.state.gateway_service
    insight.state.gateway_service = gateway_service
    try:
        http_client = httpx.AsyncClient(transport=ASGITransport(app=insight), base_url='http://testserver')
        async with AnalysisClient('http://testserver', http_client=http_client) as client:
            result = await client.analyze_image('data:image/jpeg;base64,AAAA')
        await http_client.aclose()
    finally:
        insight.state.gateway_service = original
    assert result.summary == '错误: API 额度超限'
