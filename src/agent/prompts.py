from __future__ import annotations

from typing import Callable, Dict, Optional, Union

from src.errors import InvalidModeError
from src.schemas import GenerationMode, PromptPayload, clamp_count, parse_mode
from src.utils.text import join_nonempty


SYSTEM_INSTRUCTION = """
Bạn là một giáo viên Toán THCS (Trung học cơ sở) tâm huyết và giỏi chuyên môn, am hiểu sâu sắc Chương trình Giáo dục Phổ thông 2018.

NHIỆM VỤ CỦA BẠN:
Giúp học sinh hiểu rõ bản chất bài toán thông qua việc giải bài và tạo bài tập tương tự.

QUY TẮC BẮT BUỘC VỀ KIẾN THỨC (QUAN TRỌNG NHẤT):
1. GIỚI HẠN KIẾN THỨC: Chỉ sử dụng kiến thức Toán Lớp 6, 7, 8, 9.
2. CẤM TUYỆT ĐỐI: Không dùng kiến thức cấp 3 (đạo hàm, tích phân, giới hạn, số phức, ma trận...) hay các định lý nâng cao không thuộc chương trình THCS.
3. PHƯƠNG PHÁP: Ưu tiên các phương pháp sơ cấp, biến đổi đại số cơ bản, hình học Euclide phẳng truyền thống.

CẤU TRÚC CÂU TRẢ LỜI (BẮT BUỘC):
Với mỗi bài toán, bạn phải trình bày đủ 3 phần sau:

1. **Phân tích & Định hướng**:
   - Xác định đây là dạng toán gì (Ví dụ: Rút gọn biểu thức, Hình học phẳng, Phương trình nghiệm nguyên...).
   - Nêu phương pháp sẽ sử dụng để giải.

2. **Lời giải chi tiết**:
   - Trình bày từng bước logic, mạch lạc.
   - Giải thích rõ tại sao lại biến đổi như vậy (Ví dụ: "Áp dụng hằng đẳng thức...", "Vì tam giác ABC cân tại A nên...").

3. **💡 Bình luận & Nhận xét của Giáo viên**:
   - **SO SÁNH VỚI BÀI GỐC** (Bắt buộc đối với bài tập tương tự/nâng cao): Chỉ rõ điểm khác biệt của bài mới này so với bài gốc (Ví dụ: "Bài này giữ nguyên dạng nhưng thay đổi hệ số...", "Bài này nâng cao hơn ở chỗ thêm điều kiện x...").
   - Nhắc nhở các lỗi sai học sinh thường gặp ở dạng bài này.
   - Gợi ý mẹo nhớ nhanh hoặc cách kiểm tra lại kết quả.
   - Nếu là bài hình học, hãy nhắc học sinh chú ý vẽ hình chính xác.

QUY TẮC ĐỊNH DẠNG:
- Tất cả công thức toán phải đặt trong dấu $...$. Ví dụ: $x^2 + 2x + 1 = (x+1)^2$.
- Tiêu đề các phần (Lời giải, Bình luận...) nên in đậm để dễ nhìn.
- Nếu hình ảnh được cung cấp KHÔNG PHẢI là bài tập toán (ví dụ: ảnh phong cảnh, văn bản môn văn...), hãy lịch sự từ chối và yêu cầu học sinh tải lên đúng ảnh bài tập toán.
""".strip()


FORMAT_INSTRUCTION = (
    "Trình bày rõ ràng, sử dụng LaTeX cho công thức toán ($...$). "
    "Tuân thủ cấu trúc 3 phần: Phân tích -> Lời giải -> Bình luận."
)

ORIGINAL_QUANTITY_CLAUSE = (
    "YÊU CẦU: Chỉ giải 1 bài toán gốc trong hình, kèm lời giải chi tiết và bình luận."
)
SINGLE_QUANTITY_CLAUSE = "YÊU CẦU: Tạo ra 1 bài toán hoàn chỉnh kèm lời giải chi tiết và bình luận."

OVERRIDE_RULER = "----------------"
OVERRIDE_HEADER = "LƯU Ý QUAN TRỌNG TỪ NGƯỜI DÙNG (Hãy ưu tiên thực hiện yêu cầu này):"


def effective_count(mode: GenerationMode, problem_count: int) -> int:
    if mode == GenerationMode.ORIGINAL:
        return 1
    return clamp_count(problem_count)


def quantity_clause(mode: GenerationMode, problem_count: int) -> str:
    count = effective_count(mode, problem_count)
    if mode == GenerationMode.ORIGINAL:
        return ORIGINAL_QUANTITY_CLAUSE
    if count == 1:
        return SINGLE_QUANTITY_CLAUSE
    return (
        f"YÊU CẦU: Tạo ra đúng {count} bài toán riêng biệt. "
        "Đánh số rõ ràng (Bài 1, Bài 2...). "
        "Với MỖI bài toán, phải thực hiện đầy đủ quy trình giải và bình luận."
    )


def _original_template(quantity: str) -> str:
    return f"""
NHIỆM VỤ: Giải bài tập gốc trong hình ảnh.
{quantity}
1. Hãy đọc kỹ đề bài trong hình và chép lại đề bài bằng văn bản (nếu hình mờ hãy cố gắng luận giải).
2. Phân tích hướng giải (dạng toán nào, dùng định lý nào).
3. Giải chi tiết từng bước (Step-by-step) sử dụng kiến thức Toán THCS.
4. Đưa ra nhận xét sư phạm cuối bài.
""".strip()


def _similar_template(quantity: str) -> str:
    return f"""
NHIỆM VỤ: Sáng tạo bài tập tương tự để luyện tập.
1. Phân tích bài toán gốc trong hình.
2. {quantity}
3. Các bài toán này chỉ thay đổi số liệu hoặc ngữ cảnh, GIỮ NGUYÊN cấu trúc và độ khó so với bài gốc.
4. Giải chi tiết từng bài.
5. QUAN TRỌNG: Trong phần bình luận, BẮT BUỘC phải so sánh: Bài mới này khác bài gốc ở đâu? (Ví dụ: "Thay đổi hệ số a từ 2 thành 3", "Đổi dấu từ cộng sang trừ"...).
""".strip()


def _advanced_template(quantity: str) -> str:
    return f"""
NHIỆM VỤ: Sáng tạo bài tập nâng cao từ bài gốc.
1. Phân tích bài toán gốc trong hình để hiểu cấu trúc và dạng bài.
2. {quantity}
3. Các bài toán mới này phải CÙNG DẠNG với bài gốc nhưng MỞ RỘNG/NÂNG CAO HƠN (tăng độ khó, yêu cầu tư duy sâu hơn).
4. Giải chi tiết từng bài.
5. QUAN TRỌNG: Trong phần bình luận, BẮT BUỘC phải so sánh: Bài mới này khó hơn bài gốc ở điểm nào? (Thêm biến, thêm điều kiện, hay cần kỹ thuật giải phức tạp hơn?).
LƯU Ý: Vẫn chỉ được dùng kiến thức THCS (Lớp 6 đến Lớp 9) để giải; không dùng đạo hàm, tích phân, giới hạn, số phức, ma trận hay kiến thức cấp 3.
""".strip()


_TEMPLATES: Dict[GenerationMode, Callable[[str], str]] = {
    GenerationMode.ORIGINAL: _original_template,
    GenerationMode.SIMILAR: _similar_template,
    GenerationMode.ADVANCED: _advanced_template,
}


def override_block(custom_instruction: Optional[str]) -> str:
    text = custom_instruction or ""
    if not text.strip():
        return ""
    return f'{OVERRIDE_RULER}\n{OVERRIDE_HEADER} "{text}"\n{OVERRIDE_RULER}'


def build_user_prompt(
    mode: GenerationMode,
    problem_count: int = 1,
    custom_instruction: Optional[str] = "",
) -> str:
    template = _TEMPLATES.get(mode)
    if template is None:
        raise InvalidModeError(f"No prompt template for mode: {mode!r}")

    body = template(quantity_clause(mode, problem_count))
    prompt = f"{body}\n{FORMAT_INSTRUCTION}"

    return join_nonempty([prompt, override_block(custom_instruction)], sep="\n\n")


def build_prompt(
    mode: Union[str, GenerationMode],
    problem_count: int = 1,
    custom_instruction: Optional[str] = "",
) -> PromptPayload:
    """Build the (system instruction, user prompt) pair for one generation.

    Pure function of its inputs. The system instruction never depends on
    the mode; the user prompt is the mode template, its quantity clause,
    the shared format clause and, when the user typed something, an
    override block quoting it.
    """
    m = parse_mode(mode)
    return PromptPayload(
        system_instruction=SYSTEM_INSTRUCTION,
        user_prompt=build_user_prompt(m, problem_count, custom_instruction),
    )
