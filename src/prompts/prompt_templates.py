"""Dynamic reply construction for state- and data-dependent messages."""

from datetime import date

from src.prompts.messages import ARRIVAL_INSTRUCTIONS
from src.schemas.booking_schema import Booking, BotMetrics
from src.utils import format_date


def build_slot_list_prompt(unit_name: str, available_times: list[str]) -> str:
    """Numbered list of the slots that still have seats."""
    lines = [f"⏰ *HORÁRIOS DISPONÍVEIS - {unit_name.upper()}*", ""]
    lines.extend(f"{i}. {slot}" for i, slot in enumerate(available_times, start=1))
    lines.append("\nDigite o *número* do horário desejado.")
    return "\n".join(lines)


def build_free_time_prompt(unit_name: str) -> str:
    return (
        f"⏰ *ESCOLHA O HORÁRIO - {unit_name.upper()}*\n\n"
        "Digite o horário desejado no formato HH:MM\n"
        "Exemplo: 18:30"
    )


def build_invalid_slot_choice(slot_count: int) -> str:
    return f"Opção inválida. Digite um número de 1 a {slot_count}."


def build_no_slots_message(unit_name: str, iso_date: str) -> str:
    return (
        f"❌ Não há horários disponíveis para {format_date(iso_date)} "
        f"na unidade {unit_name}.\n\nDigite *MENU* para voltar ao início."
    )


def build_confirmation(booking: Booking, unit_name: str) -> str:
    """Confirmation summary sent to the user after the ledger write."""
    lines = [
        "✅ *AGENDAMENTO CONFIRMADO!*",
        "",
        f"🏢 *Unidade:* {unit_name}",
        f"📅 *Data:* {format_date(booking.date)}",
        f"⏰ *Horário:* {booking.time}",
        f"👤 *Nome:* {booking.name}",
        f"📱 *Telefone:* {booking.phone}",
    ]
    if booking.companion:
        lines.append(f"👥 *Acompanhante:* {booking.companion}")
    lines.extend([
        "",
        "🎯 *Sua aula experimental é GRATUITA!*",
        "",
        ARRIVAL_INSTRUCTIONS,
        "",
        "💬 Digite *MENU* para outras opções.",
    ])
    return "\n".join(lines)


def build_staff_notification(booking: Booking) -> str:
    """Summary posted to the unit's staff channel."""
    lines = [
        f"🎯 Nova Reserva Experimental - {booking.unit.value.upper()}",
        "",
        f"👤 Nome: {booking.name}",
        f"📱 Telefone: {booking.phone}",
        f"📅 Data: {format_date(booking.date)}",
        f"⏰ Horário: {booking.time}",
    ]
    if booking.companion:
        lines.append(f"👥 Acompanhante: {booking.companion}")
    lines.append(f"\n🔢 ID: {booking.id}")
    return "\n".join(lines)


def build_booking_listing(unit_name: str, iso_date: str, bookings: list[Booking]) -> str:
    """Operator view of one unit/date, numbered in insertion order."""
    lines = [f"📅 *Vagas {unit_name.upper()} - {iso_date}*", ""]
    if not bookings:
        lines.append("Nenhuma reserva para esta data.")
        return "\n".join(lines)
    for i, booking in enumerate(bookings, start=1):
        lines.append(f"{i}. {booking.name} - {booking.time}")
        if booking.companion:
            lines.append(f"   + Acompanhante: {booking.companion}")
    return "\n".join(lines)


def build_daily_report(
    today: date,
    metrics: BotMetrics,
    bookings_today: dict[str, int],
    paused_chats: int,
) -> str:
    lines = [
        "📊 *RELATÓRIO DIÁRIO*",
        "",
        f"📅 *Data:* {today.isoformat()}",
        "",
        "📈 *Métricas Gerais:*",
        f"• Mensagens recebidas: {metrics.messages_received}",
        f"• Agendamentos experimentais: {metrics.trial_bookings}",
        f"• Menus exibidos: {metrics.menus_shown}",
        f"• Interferências humanas: {metrics.human_takeovers}",
        "",
        "🏢 *Reservas Hoje:*",
    ]
    lines.extend(f"• {name}: {count}" for name, count in bookings_today.items())
    lines.append("")
    lines.append(f"⏸️ *Chats pausados:* {paused_chats}")
    return "\n".join(lines)
