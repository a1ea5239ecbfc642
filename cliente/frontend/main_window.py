"""Ventana principal de Estoque Usinagem."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont, QGuiApplication
from PyQt6.QtWidgets import (
    QApplication,
    QComboBox,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from cliente.backend.controller import AppController
from cliente.frontend.dialogs import show_error, show_info
from cliente.frontend.records_pages import PartsPage, StudentsPage, TransactionsPage
from cliente.frontend.widgets.tables import build_table, fill_table
from cliente.frontend.withdrawals_page import WithdrawalsPage
from servidor.services.inventory_utils import format_quantity
from servidor.services.stock_summary import TargetPolicy
from shared.errors import ServiceError, ValidationError

SUMMARY_COLUMNS = (
    "Tarefa",
    "Código",
    "Meta",
    "Entradas",
    "Saídas",
    "Alunos",
    "Saldo",
    "Situação",
    "Comprar",
)
PURCHASE_COLUMNS = ("Tarefa", "Nome", "Saldo", "Meta", "Comprar")
POLICY_LABELS: dict[TargetPolicy, str] = {
    TargetPolicy.FIXED_TARGET: "Necessidade fixa da peça",
    TargetPolicy.REMAINING_STUDENTS: "Alunos que ainda não receberam",
}


class MainWindow(QMainWindow):
    """Ventana principal con las pestañas del inventario."""

    def __init__(self, controller: AppController) -> None:
        super().__init__()
        self._controller = controller

        self._tabs: QTabWidget
        self._stat_labels: dict[str, QLabel] = {}
        self._top_purchases_label: QLabel
        self._summary_table = build_table(SUMMARY_COLUMNS)
        self._purchase_table = build_table(PURCHASE_COLUMNS)
        self._policy_combo: QComboBox
        self._export_button: QPushButton
        self._exit_button: QPushButton

        self.setWindowTitle("SENAI - Estoque Usinagem")
        screen = QGuiApplication.primaryScreen()
        if screen is not None:
            geo = screen.availableGeometry()
            self.resize(int(geo.width() * 0.75), int(geo.height() * 0.85))
        self._build_ui()
        self._apply_styles()
        self._connect_signals()
        self.refresh_all()

    def _build_ui(self) -> None:
        """Construye las pestañas de la ventana."""
        self._tabs = QTabWidget(self)
        self.setCentralWidget(self._tabs)

        self._withdrawals_page = WithdrawalsPage(self._controller, self.refresh_all, self)
        self._transactions_page = TransactionsPage(self._controller, self.refresh_all, self)
        self._parts_page = PartsPage(self._controller, self.refresh_all, self)
        self._students_page = StudentsPage(self._controller, self.refresh_all, self)

        self._tabs.addTab(self._build_dashboard_page(), "Início")
        self._tabs.addTab(self._withdrawals_page, "Entregar")
        self._tabs.addTab(self._transactions_page, "Entradas")
        self._tabs.addTab(self._build_stock_page(), "Saldos")
        self._tabs.addTab(self._build_planning_page(), "Compras")
        self._tabs.addTab(self._parts_page, "Peças")
        self._tabs.addTab(self._students_page, "Alunos")

    def _build_dashboard_page(self) -> QWidget:
        page = QWidget(self)
        root_layout = QVBoxLayout(page)
        root_layout.setContentsMargins(24, 24, 24, 24)

        title_label = QLabel(page)
        title_label.setObjectName("titleLabel")
        title_label.setFont(QFont("Segoe UI", 24, QFont.Weight.Bold))
        title_label.setTextFormat(Qt.TextFormat.RichText)
        title_label.setText(
            '<span style="color:#C80202;"><i>SENAI</i></span>'
            '<span style="color:#111827;"> Mecânico de Usinagem</span>'
        )

        stats_layout = QGridLayout()
        for column, (key, caption) in enumerate(
            (
                ("students", "Alunos"),
                ("total_stock", "Estoque"),
                ("total_delivered", "Entregues"),
                ("critical_items", "Críticos"),
            )
        ):
            card = QFrame(page)
            card.setObjectName("statCard")
            card_layout = QVBoxLayout(card)
            caption_label = QLabel(caption, card)
            value_label = QLabel("0", card)
            value_label.setObjectName("statValue")
            card_layout.addWidget(caption_label)
            card_layout.addWidget(value_label)
            self._stat_labels[key] = value_label
            stats_layout.addWidget(card, 0, column)

        self._top_purchases_label = QLabel(page)
        self._top_purchases_label.setWordWrap(True)

        self._exit_button = QPushButton("Sair", page)
        self._exit_button.setObjectName("exitButton")

        root_layout.addWidget(title_label)
        root_layout.addSpacing(12)
        root_layout.addLayout(stats_layout)
        root_layout.addSpacing(12)
        root_layout.addWidget(self._top_purchases_label)
        root_layout.addStretch(1)
        root_layout.addWidget(self._exit_button, alignment=Qt.AlignmentFlag.AlignRight)
        return page

    def _build_stock_page(self) -> QWidget:
        page = QWidget(self)
        root_layout = QVBoxLayout(page)
        root_layout.setContentsMargins(16, 16, 16, 16)

        toolbar = QHBoxLayout()
        self._policy_combo = QComboBox(page)
        for policy, label in POLICY_LABELS.items():
            self._policy_combo.addItem(label, policy.value)
        self._policy_combo.setCurrentIndex(
            self._policy_combo.findData(self._controller.policy.value)
        )
        self._export_button = QPushButton("Exportar CSV", page)
        toolbar.addWidget(QLabel("Meta de compra:", page))
        toolbar.addWidget(self._policy_combo)
        toolbar.addStretch(1)
        toolbar.addWidget(self._export_button)

        self._summary_table.setParent(page)
        root_layout.addLayout(toolbar)
        root_layout.addWidget(self._summary_table)
        return page

    def _build_planning_page(self) -> QWidget:
        page = QWidget(self)
        root_layout = QVBoxLayout(page)
        root_layout.setContentsMargins(16, 16, 16, 16)
        self._purchase_table.setParent(page)
        root_layout.addWidget(self._purchase_table)
        return page

    def _apply_styles(self) -> None:
        """Aplica estilos QSS de la interfaz."""
        self.setStyleSheet(
            """
            QMainWindow {
                background-color: #F8FAFC;
            }
            QFrame#statCard {
                background-color: #ffffff;
                border: 1px solid #e5e7eb;
                border-radius: 12px;
                min-height: 70px;
            }
            QLabel#statValue {
                color: #111827;
                font-size: 26px;
                font-weight: 800;
            }
            QPushButton {
                background-color: #C80202;
                border: none;
                border-radius: 8px;
                color: #ffffff;
                font-family: "Segoe UI";
                font-size: 13px;
                font-weight: 600;
                min-height: 32px;
                padding: 4px 14px;
            }
            QPushButton:hover {
                background-color: #A30202;
            }
            QPushButton#exitButton {
                background-color: #e5e7eb;
                color: #1f2937;
            }
            """
        )

    def _connect_signals(self) -> None:
        self._policy_combo.currentIndexChanged.connect(self._on_policy_changed)
        self._export_button.clicked.connect(self._on_export_clicked)
        self._exit_button.clicked.connect(self._on_exit_clicked)

    def refresh_all(self) -> None:
        """Recalcula resumenes y refresca todas las pestañas."""
        summary = self._controller.stock_summary()
        fill_table(
            self._summary_table,
            [
                [
                    item.part_id,
                    item.code,
                    format_quantity(item.target),
                    format_quantity(item.entries),
                    format_quantity(item.exits),
                    str(item.student_exits),
                    format_quantity(item.balance),
                    item.situation.value,
                    format_quantity(item.to_buy),
                ]
                for item in summary
            ],
        )
        fill_table(
            self._purchase_table,
            [
                [
                    item.part_id,
                    item.name,
                    format_quantity(item.balance),
                    format_quantity(item.target),
                    format_quantity(item.to_buy),
                ]
                for item in self._controller.purchase_list()
            ],
        )

        stats = self._controller.dashboard_stats()
        self._stat_labels["students"].setText(str(stats.students))
        self._stat_labels["total_stock"].setText(format_quantity(stats.total_stock))
        self._stat_labels["total_delivered"].setText(str(stats.total_delivered))
        self._stat_labels["critical_items"].setText(str(stats.critical_items))
        if stats.top_purchases:
            lines = [
                f"{item.part_id} - {item.name}: comprar {format_quantity(item.to_buy)}"
                for item in stats.top_purchases
            ]
            self._top_purchases_label.setText("Prioridade de compra:\n" + "\n".join(lines))
        else:
            self._top_purchases_label.setText("Estoque em dia.")

        self._withdrawals_page.refresh()
        self._transactions_page.refresh()
        self._parts_page.refresh()
        self._students_page.refresh()

    def _on_policy_changed(self, _index: int) -> None:
        self._controller.set_policy(self._policy_combo.currentData())
        self.refresh_all()

    def _on_export_clicked(self, _checked: bool = False) -> None:
        try:
            path = self._controller.export_stock_summary()
        except (ValidationError, ServiceError) as exc:
            show_error(self, "Erro ao exportar", str(exc))
            return
        show_info(self, "Exportação concluída", f"Arquivo criado em:\n{path}")

    def _on_exit_clicked(self, _checked: bool = False) -> None:
        """Solicita al controller el cierre de la app."""
        self._controller.on_exit(QApplication.instance())
