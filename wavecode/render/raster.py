"""QImage rasterization backend for wave scenes."""

from __future__ import annotations

from PySide6.QtCore import QBuffer, QIODevice, QPointF, QRectF, Qt
from PySide6.QtGui import (
    QBrush,
    QColor,
    QGradient,
    QImage,
    QLinearGradient,
    QPainter,
    QPainterPath,
    QPolygonF,
)

from wavecode.errors import ErrorCode, WaveCodeError
from wavecode.render.scene import (
    CircleShape,
    DropShadow,
    Fill,
    LinearGradientFill,
    RectShape,
    RoundedRectShape,
    Shape,
    TriangleShape,
    WaveScene,
    round_half_up,
)

_METERS_PER_INCH = 0.0254


def rasterize(scene: WaveScene) -> QImage:
    """Draw a scene onto an opaque image at the scene's pixel size."""
    image = QImage(max(1, scene.width), max(1, scene.height), QImage.Format.Format_RGB32)
    image.fill(QColor(scene.background))
    dots_per_meter = round_half_up(scene.dpi / _METERS_PER_INCH)
    image.setDotsPerMeterX(dots_per_meter)
    image.setDotsPerMeterY(dots_per_meter)

    if not scene.shapes:
        return image

    bars = _paint_bar_layer(scene, image.width(), image.height())
    painter = QPainter(image)
    try:
        # Group opacity applies to bars and shadows together, never the background.
        painter.setOpacity(scene.opacity)
        painter.drawImage(0, 0, bars)
    finally:
        painter.end()
    return image


def encode_png(image: QImage) -> bytes:
    buffer = QBuffer()
    if not buffer.open(QIODevice.OpenModeFlag.WriteOnly):
        raise WaveCodeError(ErrorCode.IMAGE_ENCODE_FAILED, details={"reason": "buffer open failed"})
    try:
        if not image.save(buffer, "PNG"):
            raise WaveCodeError(ErrorCode.IMAGE_ENCODE_FAILED)
        return bytes(buffer.data().data())
    finally:
        buffer.close()


def shape_path(shape: Shape) -> QPainterPath:
    path = QPainterPath()
    if isinstance(shape, RoundedRectShape):
        path.addRoundedRect(
            QRectF(shape.x, shape.y, shape.width, shape.height), shape.radius, shape.radius
        )
    elif isinstance(shape, CircleShape):
        path.addEllipse(QPointF(shape.cx, shape.cy), shape.radius, shape.radius)
    elif isinstance(shape, TriangleShape):
        path.addPolygon(QPolygonF([QPointF(x, y) for x, y in shape.points]))
        path.closeSubpath()
    elif isinstance(shape, RectShape):
        path.addRect(QRectF(shape.x, shape.y, shape.width, shape.height))
    else:
        raise TypeError(f"Unsupported shape: {type(shape).__name__}")
    return path


def fill_brush(fill: Fill) -> QBrush:
    if isinstance(fill, LinearGradientFill):
        gradient = QLinearGradient(fill.x1 / 100, fill.y1 / 100, fill.x2 / 100, fill.y2 / 100)
        gradient.setCoordinateMode(QGradient.CoordinateMode.ObjectBoundingMode)
        gradient.setColorAt(0.0, QColor(fill.start_color))
        gradient.setColorAt(1.0, QColor(fill.end_color))
        return QBrush(gradient)
    return QBrush(QColor(fill.color))


def blur_image(image: QImage, radius: float) -> QImage:
    """Approximate a gaussian blur by smooth down- and up-scaling.

    ``radius`` stands in for the gaussian standard deviation in pixels.
    Shrinking by ``1 + radius`` averages each pixel with about that many
    neighbours per axis, and the smooth upscale spreads the result back out,
    so the falloff width tracks the deviation for the 0-10 range themes allow.
    The edge profile is a bilinear ramp, not a true gaussian curve.
    """
    if radius <= 0:
        return image
    width = image.width()
    height = image.height()
    factor = 1.0 + radius
    tiny = image.scaled(
        max(1, round_half_up(width / factor)),
        max(1, round_half_up(height / factor)),
        Qt.AspectRatioMode.IgnoreAspectRatio,
        Qt.TransformationMode.SmoothTransformation,
    )
    return tiny.scaled(
        width,
        height,
        Qt.AspectRatioMode.IgnoreAspectRatio,
        Qt.TransformationMode.SmoothTransformation,
    )


def _transparent_layer(width: int, height: int) -> QImage:
    layer = QImage(width, height, QImage.Format.Format_ARGB32_Premultiplied)
    layer.fill(Qt.GlobalColor.transparent)
    return layer


def _paint_bar_layer(scene: WaveScene, width: int, height: int) -> QImage:
    layer = _transparent_layer(width, height)
    painter = QPainter(layer)
    try:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        # Bars sharing shadow settings cast one blurred layer beneath every bar.
        for shadow, shapes in _group_by_shadow(scene.shapes):
            shadow_layer = _paint_shadow_layer(shadow, shapes, width, height)
            painter.save()
            painter.setOpacity(shadow.opacity)
            painter.drawImage(0, 0, shadow_layer)
            painter.restore()
        painter.setPen(Qt.PenStyle.NoPen)
        for shape in scene.shapes:
            painter.fillPath(shape_path(shape), fill_brush(shape.fill))
    finally:
        painter.end()
    return layer


def _paint_shadow_layer(
    shadow: DropShadow,
    shapes: list[Shape],
    width: int,
    height: int,
) -> QImage:
    layer = _transparent_layer(width, height)
    painter = QPainter(layer)
    try:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.translate(shadow.dx, shadow.dy)
        brush = QBrush(QColor(shadow.color))
        for shape in shapes:
            painter.fillPath(shape_path(shape), brush)
    finally:
        painter.end()
    return blur_image(layer, shadow.blur)


def _group_by_shadow(shapes: tuple[Shape, ...]) -> list[tuple[DropShadow, list[Shape]]]:
    groups: dict[DropShadow, list[Shape]] = {}
    for shape in shapes:
        if shape.shadow is not None:
            groups.setdefault(shape.shadow, []).append(shape)
    return list(groups.items())
