from __future__ import annotations


UNSUPPORTED_MEDIA_MESSAGE = "Định dạng file không hỗ trợ. Vui lòng chọn PNG, JPG hoặc PDF."
MEDIA_READ_MESSAGE = "Lỗi khi đọc file. Vui lòng thử lại."
AI_SERVICE_ERROR_MESSAGE = (
    "Đã xảy ra lỗi khi kết nối với AI. Vui lòng kiểm tra API Key hoặc thử lại sau."
)
INVALID_MODE_MESSAGE = "Chế độ không hợp lệ. Vui lòng chọn: giải bài gốc, bài tương tự hoặc bài nâng cao."
EMPTY_RESULT_MESSAGE = "Xin lỗi, tôi không thể xử lý yêu cầu này lúc này. Vui lòng thử lại."


class MathTutorError(Exception):
    """Base error; `user_message` is what the UI shows."""

    user_message = AI_SERVICE_ERROR_MESSAGE


class UnsupportedMediaError(MathTutorError):
    user_message = UNSUPPORTED_MEDIA_MESSAGE


class MediaReadError(MathTutorError):
    user_message = MEDIA_READ_MESSAGE


class AIServiceError(MathTutorError):
    user_message = AI_SERVICE_ERROR_MESSAGE


class InvalidModeError(MathTutorError, ValueError):
    user_message = INVALID_MODE_MESSAGE
