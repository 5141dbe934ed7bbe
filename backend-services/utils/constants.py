class Headers:
    REQUEST_ID = 'request_id'
    CONTENT_TYPE_JSON = 'application/json'


class Defaults:
    PLACEHOLDER_TEXT = 'Hello'
    IMAGE_MIME_TYPE = 'image/jpeg'
    FILE_MIME_TYPE = 'application/octet-stream'
    GATEWAY_PATH = '/gateway'
    GATEWAY_BASE_URL = 'http://localhost:5001'
    SUMMARY_PREVIEW_CHARS = 100


class Instructions:
    IMAGE = '请分析这张图片的内容'
    DOCUMENT = '请分析这份文档的内容'
    WEB_URL = '请分析此网页内容：{url}'
    VIDEO_URL = '请分析此视频内容：{url}'


class Messages:
    LIVENESS = 'Gemini proxy is running'
    METHOD_NOT_ALLOWED = '仅支持 POST /gateway，请使用 POST 请求。当前方法: {method}'
    INVALID_REQUEST = '请求 body 不能为空，请至少提供 text、image 或 file.base64 其中之一。'
    RATE_LIMIT = 'Google Gemini API 调用额度已超限，请稍后重试或检查配额设置。'
    UPSTREAM_ERROR = '上游服务返回错误: {status}'
    INTERNAL_ERROR = 'Gemini 代理内部错误'


class ResultText:
    RATE_LIMIT_SUMMARY = '错误: API 额度超限'
    RATE_LIMIT_DEFAULT = 'Google Gemini API 调用额度已超限，请稍后再试。'
    RATE_LIMIT_CONCLUSION = '请求失败（额度超限）'
    ERROR_SUMMARY = '错误: {message}'
    ERROR_CONCLUSION = '请求失败'
    REQUEST_FAILED = '请求失败: {status}'
    PARSED_SUMMARY_DEFAULT = '分析完成'
    PLAIN_CONCLUSION = '解析完成'
