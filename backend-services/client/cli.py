import argparse
import asyncio
import base64
import json
import mimetypes
import sys
from pathlib import Path

from client.analysis_client import AnalysisClient, gateway_base_url
from models.analysis_result_model import AnalysisResultModel
from utils.logging_util import configure_logger


class InputError(Exception):
    """Input the user must fix before anything is sent."""


def guess_mime_type(path: Path) -> str:
    mime, _ = mimetypes.guess_type(path.name)
    return mime or 'application/octet-stream'


async def read_file(path: Path) -> bytes:
    return await asyncio.to_thread(path.read_bytes)


async def read_data_url(path: Path) -> tuple[str, str]:
    mime = guess_mime_type(path)
    data = await read_file(path)
    return f'data:{mime};base64,{base64.b64encode(data).decode("ascii")}', mime


async def _require_file(path: str | None, prefix: str, message: str) -> tuple[str, str]:
    if not path:
        raise InputError(message)
    p = Path(path)
    if not p.is_file() or not guess_mime_type(p).startswith(prefix):
        raise InputError(message)
    return await read_data_url(p)


async def do_text(client: AnalysisClient, args) -> AnalysisResultModel:
    if args.file:
        p = Path(args.file)
        if not p.is_file():
            raise InputError('请输入文本内容或上传文件')
        mime = guess_mime_type(p)
        if mime == 'application/pdf' or p.suffix.lower() == '.pdf':
            data_url, _ = await read_data_url(p)
            return await client.analyze_document(data_url, 'application/pdf')
        content = args.text
        if not content and mime == 'text/plain':
            content = (await read_file(p)).decode('utf-8', errors='replace')
    else:
        content = args.text
    if not content:
        raise InputError('请输入文本内容或上传文件')
    return await client.analyze_text(content)


async def do_image(client: AnalysisClient, args) -> AnalysisResultModel:
    data_url, mime = await _require_file(args.file, 'image/', '请上传图片文件')
    return await client.analyze_image(data_url, mime)


async def do_audio(client: AnalysisClient, args) -> AnalysisResultModel:
    data_url, mime = await _require_file(args.file, 'audio/', '请上传音频文件')
    return await client.analyze_audio_file(data_url, mime)


async def do_video(client: AnalysisClient, args) -> AnalysisResultModel:
    if args.file:
        data_url, mime = await _require_file(args.file, 'video/', '请上传本地视频文件')
        return await client.analyze_video_file(data_url, mime)
    if not (args.url or '').strip():
        raise InputError('请输入视频 URL')
    return await client.analyze_video_url(args.url)


async def do_web(client: AnalysisClient, args) -> AnalysisResultModel:
    if not (args.url or '').strip():
        raise InputError('请输入网页链接 URL')
    return await client.analyze_web_url(args.url)


async def do_document(client: AnalysisClient, args) -> AnalysisResultModel:
    p = Path(args.file)
    if not p.is_file():
        raise InputError('请上传文件')
    data_url, mime = await read_data_url(p)
    return await client.analyze_document(data_url, args.mime_type or mime)


def render(result: AnalysisResultModel) -> str:
    lines = [result.summary, '']
    for point in result.key_points:
        lines.append(f'- {point}')
    if result.key_points:
        lines.append('')
    if result.conclusion:
        lines.append(result.conclusion)
    if result.detailed_analysis and result.detailed_analysis not in result.key_points:
        lines.extend(['', result.detailed_analysis])
    return '\n'.join(lines)


async def run(args) -> AnalysisResultModel:
    async with AnalysisClient(args.base_url or gateway_base_url(), timeout=args.timeout) as client:
        return await args.func(client, args)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description='Analyze text, images, documents, audio, video or web pages through the insight gateway')
    p.add_argument('--base-url', help='Gateway base URL (default: $BASE_URL or http://localhost:5001)')
    p.add_argument('--timeout', type=float, default=None, help='Seconds to wait for the gateway (default: no limit)')
    p.add_argument('--json', action='store_true', help='Print the result as JSON')
    sub = p.add_subparsers(dest='cmd', required=True)

    t = sub.add_parser('text', help='Analyze text, a .txt file or a PDF')
    t.add_argument('--text')
    t.add_argument('--file')
    t.set_defaults(func=do_text)

    i = sub.add_parser('image', help='Analyze an image file')
    i.add_argument('file')
    i.set_defaults(func=do_image)

    a = sub.add_parser('audio', help='Analyze an audio file')
    a.add_argument('file')
    a.set_defaults(func=do_audio)

    v = sub.add_parser('video', help='Analyze a video file or a video URL')
    group = v.add_mutually_exclusive_group(required=True)
    group.add_argument('--url')
    group.add_argument('--file')
    v.set_defaults(func=do_video)

    w = sub.add_parser('web', help='Analyze a web page by URL')
    w.add_argument('url')
    w.set_defaults(func=do_web)

    d = sub.add_parser('document', help='Analyze any file as an inline document')
    d.add_argument('file')
    d.add_argument('--mime-type')
    d.set_defaults(func=do_document)
    return p


def main(argv=None) -> int:
    configure_logger('insight.client', file_logging=False)
    args = build_parser().parse_args(argv)
    try:
        result = asyncio.run(run(args))
    except InputError as e:
        print(str(e), file=sys.stderr)
        return 2
    except OSError as e:
        print(f'分析失败，请检查输入或重试: {e}', file=sys.stderr)
        return 2
    if args.json:
        print(json.dumps(result.to_wire(), ensure_ascii=False, indent=2))
    else:
        print(render(result))
    return 0


if __name__ == '__main__':
    sys.exit(main())
