"""Canned screens of the driver app for tests and dry runs.

The layouts follow the reservation-call flow: list, detail, confirm dialog
and the "already assigned" / "canceled" dialogs.
"""

from ..model.region import Region
from ..model.ui_node import UINode, UISnapshot

PACKAGE = "com.kakao.taxi.driver"
APP_ID = f"{PACKAGE}:id"
RECYCLER_VIEW = "androidx.recyclerview.widget.RecyclerView"

ITEM_TOP = 300
ITEM_HEIGHT = 180
SCREEN_WIDTH = 1080


def text_view(text: str, identifier: str | None = None, bounds: Region | None = None) -> UINode:
    return UINode(
        identifier=identifier,
        text=text,
        class_name="android.widget.TextView",
        bounds=bounds or Region(),
    )


def button(
    text: str, identifier: str | None = None, bounds: Region | None = None, enabled: bool = True
) -> UINode:
    return UINode(
        identifier=identifier,
        text=text,
        class_name="android.widget.Button",
        bounds=bounds or Region(40, 2000, 1000, 150),
        clickable=True,
        enabled=enabled,
    )


def call_item(
    origin: str,
    destination: str,
    price: int,
    scheduled: str = "01.10(목) 14:30",
    category: str = "일반 예약",
    index: int = 0,
    with_ids: bool = True,
) -> UINode:
    """One row of the reservation list."""
    top = ITEM_TOP + index * (ITEM_HEIGHT + 20)
    bounds = Region(0, top, SCREEN_WIDTH, ITEM_HEIGHT)

    def field_id(name: str) -> str | None:
        return f"{APP_ID}/{name}" if with_ids else None

    return UINode(
        identifier=field_id("vg_item"),
        class_name="android.widget.LinearLayout",
        bounds=bounds,
        clickable=True,
        children=(
            text_view(f"{scheduled} / {category}", field_id("tv_reserved_at"), bounds),
            text_view(f"{origin} → {destination}", field_id("tv_path"), bounds),
            text_view(f"요금 {price:,}원", field_id("tv_fare"), bounds),
        ),
    )


def screen(*children: UINode, package: str = PACKAGE) -> UISnapshot:
    root = UINode(
        class_name="android.widget.FrameLayout",
        bounds=Region(0, 0, SCREEN_WIDTH, 2340),
        children=children,
    )
    return UISnapshot(root, package_name=package)


def list_screen(items: list[UINode] | None = None, refresh_clickable: bool = True) -> UISnapshot:
    """The reservation list with a refresh button and the given rows."""
    return screen(
        text_view("예약콜 리스트", bounds=Region(0, 0, 600, 120)),
        UINode(
            identifier=f"{APP_ID}/action_refresh",
            description="새로고침",
            class_name="android.widget.ImageButton",
            bounds=Region(960, 0, 120, 120),
            clickable=refresh_clickable,
        ),
        UINode(
            class_name=RECYCLER_VIEW,
            bounds=Region(0, ITEM_TOP, SCREEN_WIDTH, 2000),
            children=tuple(items or ()),
        ),
    )


def detail_screen(with_accept: bool = True, accept_id: bool = True) -> UISnapshot:
    """Detail of an opened call."""
    children = [
        text_view("예약콜 상세", bounds=Region(0, 0, 600, 120)),
        text_view("출발지", bounds=Region(40, 200, 300, 80)),
        text_view("도착지", bounds=Region(40, 300, 300, 80)),
        UINode(identifier=f"{APP_ID}/map_view", bounds=Region(0, 400, SCREEN_WIDTH, 1000)),
    ]
    if with_accept:
        children.append(button("수락", f"{APP_ID}/btn_call_accept" if accept_id else None))
    return screen(*children)


def confirm_dialog(bounds: Region | None = None) -> UISnapshot:
    """Detail screen with the accept confirmation dialog on top."""
    detail = detail_screen().root.children
    return screen(
        *detail,
        text_view("이 콜을 수락하시겠습니까?", bounds=Region(100, 1000, 880, 100)),
        button("수락하기", f"{APP_ID}/btn_positive", bounds or Region(560, 1200, 400, 140)),
    )


def dead_call_dialog(marker: str = "이미 배차") -> UISnapshot:
    """Dialog shown when the call was taken or canceled."""
    return screen(
        text_view(f"{marker}된 콜입니다.", bounds=Region(100, 1000, 880, 100)),
        button("확인", "android:id/button1", Region(560, 1200, 400, 140)),
    )


def blank_screen(package: str = PACKAGE) -> UISnapshot:
    """A screen of the app with nothing recognisable on it."""
    return screen(text_view("로딩 중", bounds=Region(0, 0, 600, 120)), package=package)
