"""项目内使用的自定义异常定义。"""


class ImageSlimmerError(Exception):
    """基础异常类型。"""


class SetupError(ImageSlimmerError):
    """批处理启动前的致命错误（例如无法创建输出目录）。"""


class InvalidConfigurationError(SetupError):
    """配置不合法时抛出。"""


class PathMappingError(ImageSlimmerError):
    """输入文件不在输入根目录之下，无法映射输出路径。"""


class ConversionError(ImageSlimmerError):
    """单个文件转换失败，只影响当前文件。"""

    status = "error-convert"


class ImageReadError(ConversionError):
    """读取源文件失败。"""

    status = "error-read"


class ImageDecodeError(ConversionError):
    """源文件无法解码（格式损坏或无法识别）。"""

    status = "error-decode"


class ResizeError(ConversionError):
    """缩放失败，例如目标尺寸为 0。"""

    status = "error-resize"


class ClassifyError(ConversionError):
    """无法判定色彩类型或计算彩色像素比例。"""

    status = "error-classify"


class ImageEncodeError(ConversionError):
    """输出格式不受支持或编码失败。"""

    status = "error-encode"


class ImageWriteError(ConversionError):
    """输出写入失败。"""

    status = "error-write"
