"""
Static reply texts sent to WhatsApp users.

All user-facing copy is Portuguese and uses WhatsApp markdown (*bold*).
Texts that depend on state or configuration live in prompt_templates.
"""

MAIN_MENU = """🏐 *CT LK FUTEVÔLEI* 🏐

Escolha uma opção:

1️⃣ Informações das Unidades
2️⃣ Horários das Aulas
3️⃣ Valores e Planos
4️⃣ Agendar Aula Experimental
5️⃣ Plataformas de Check-in
6️⃣ Localização das Quadras
7️⃣ Níveis das Turmas
8️⃣ Perguntas Frequentes
9️⃣ Falar com Atendente

Digite o *número* da opção desejada ou *MENU* para voltar aqui."""

UNITS_OVERVIEW = """🏢 *NOSSAS UNIDADES*

A - Recreio dos Bandeirantes
B - Bangu

Digite *A* ou *B* para mais informações."""

RECREIO_INFO = """🏢 *UNIDADE RECREIO*

📍 *Endereço:*
Av. das Américas, 15500 - Recreio dos Bandeirantes

⏰ *Horários de Funcionamento:*
Segunda a Sexta: 6h às 22h
Sábado: 8h às 18h
Domingo: 8h às 16h

📞 *Contato:*
(21) 3325-4567

✨ *Diferenciais:*
• 4 quadras de areia
• Vestiário completo
• Estacionamento gratuito"""

BANGU_INFO = """🏢 *UNIDADE BANGU*

📍 *Endereço:*
Rua Coronel Tamarindo, 950 - Bangu

⏰ *Horários de Funcionamento:*
Segunda a Sexta: 6h às 22h
Sábado: 8h às 18h
Domingo: 8h às 16h

📞 *Contato:*
(21) 2401-8765

✨ *Diferenciais:*
• 3 quadras de areia
• Vestiário completo
• Fácil acesso de transporte público"""

SCHEDULES = """⏰ *HORÁRIOS DAS AULAS*

🏢 *RECREIO e BANGU:*
🌅 Manhã: 7h, 8h, 9h, 10h
🌞 Tarde: 14h, 15h, 16h, 17h, 18h
🌙 Noite: 19h, 20h, 21h

📅 *Aulas Experimentais:*
• Recreio: 17:30, 18:30, 19:30
• Bangu: Todos os horários disponíveis

⚠️ Chegue 15 minutos antes e traga água e toalha."""

PRICES = """💰 *VALORES E PLANOS*

🎯 *AULA AVULSA:* R$ 45,00

📅 *PLANOS MENSAIS:*
• 4 aulas: R$ 160,00
• 8 aulas: R$ 300,00
• 12 aulas: R$ 420,00
• Ilimitado: R$ 580,00

🎁 *Aula experimental:* GRÁTIS

💳 Dinheiro, PIX, Cartão"""

CHECKIN_PLATFORMS = """💳 *PLATAFORMAS DE CHECK-IN*

🔸 *Gympass*
🔸 *TotalPass*
🔸 *Wellhub*

Apresente seu cartão na recepção para realizar o check-in."""

LOCATIONS = """📍 *LOCALIZAÇÃO DAS QUADRAS*

🏢 *RECREIO:*
https://maps.google.com/?q=-23.0186,-43.4681
Av. das Américas, 15500

🏢 *BANGU:*
https://maps.google.com/?q=-22.8808,-43.4659
Rua Coronel Tamarindo, 950"""

LEVELS = """🏆 *NÍVEIS DAS TURMAS*

🥉 *INICIANTE:* primeiro contato com o esporte
🥈 *INTERMEDIÁRIO:* domínio dos fundamentos
🥇 *AVANÇADO:* alto nível técnico
🏅 *PROFISSIONAL:* preparação para torneios"""

FAQ = """❓ *PERGUNTAS FREQUENTES*

*Preciso levar algum equipamento?*
Apenas roupa esportiva e água. Fornecemos a bola.

*Posso fazer aula experimental?*
Sim! É gratuita. Digite *4* no menu.

*Qual a idade mínima?*
12 anos, com autorização dos pais.

*Posso cancelar minha aula?*
Sim, até 2h antes do horário."""

HUMAN_HANDOFF = """👨‍💼 *ATENDIMENTO HUMANO*

Você será atendido por nossa equipe em breve.

Enquanto isso, pode continuar navegando pelo menu digitando *MENU*.

📞 *Ou ligue diretamente:*
• Recreio: (21) 3325-4567
• Bangu: (21) 2401-8765"""

NOT_UNDERSTOOD = """Não entendi sua mensagem. 😅

Digite *MENU* para ver as opções disponíveis ou um número de 1 a 9."""

RATE_LIMITED = "⚠️ Muitas mensagens! Aguarde um momento antes de enviar outra."

# --- Booking flow prompts ---

TRIAL_CLASS_INTRO = """🎯 *AULA EXPERIMENTAL GRATUITA*

Venha conhecer o futevôlei! Nossa aula experimental é 100% gratuita.

🏢 *Escolha a unidade:*
A - Recreio dos Bandeirantes
B - Bangu

*RECREIO:* 17:30, 18:30, 19:30 (máximo 2 pessoas por horário)
*BANGU:* Todos os horários (conforme disponibilidade)

Digite *A* para Recreio ou *B* para Bangu."""

INVALID_UNIT = "Por favor, digite *A* para Recreio ou *B* para Bangu."

ASK_DATE = """📅 *ESCOLHA A DATA*

Para qual data deseja agendar?

Digite no formato DD/MM/AAAA
Exemplo: 25/12/2024

Ou digite *HOJE* para hoje."""

INVALID_DATE = "Data inválida. Use DD/MM/AAAA ou digite *HOJE*."

INVALID_TIME = "Horário inválido. Use o formato HH:MM."

ASK_NAME = """👤 *SEU NOME COMPLETO*

Por favor, digite seu nome completo:"""

NAME_TOO_SHORT = "Nome muito curto. Digite seu nome completo."

ASK_PHONE = """📱 *SEU TELEFONE*

Digite seu telefone com DDD:
Exemplo: (21) 99999-9999"""

INVALID_PHONE = "Telefone inválido. Use o formato (XX) XXXXX-XXXX."

ASK_COMPANION = """👥 *ACOMPANHANTE*

Vai levar acompanhante?

Digite *SIM* ou *NÃO*:"""

INVALID_COMPANION_CHOICE = "Digite *SIM* ou *NÃO*."

ASK_COMPANION_NAME = """👤 *NOME DO ACOMPANHANTE*

Digite o nome completo do acompanhante:"""

COMPANION_NAME_TOO_SHORT = "Nome muito curto. Digite o nome completo do acompanhante."

SLOT_FILLED = """❌ Este horário já está lotado. Tente outro horário.

Digite *MENU* para voltar ao início."""

OFFERED_SLOT_FILLED = "❌ Esse horário acabou de lotar. Escolha outro da lista atualizada:"

ARRIVAL_INSTRUCTIONS = """📋 *INSTRUÇÕES:*
• Chegue 15 minutos antes
• Traga roupa esportiva
• Leve água e toalha
• Não esqueça de um documento"""
