from __future__ import annotations

from dataclasses import dataclass

from ..models.transaction import Category, ExpenseCategory, IncomeCategory, TransactionType

CANCEL_KEYWORDS = frozenset({"cancel", "cancelar", "exit"})


@dataclass(frozen=True)
class Labels:
    """Every user-facing string of the dialogue for one display language."""

    main_menu_prompt: str
    add_income_button: str
    add_expense_button: str
    last_button: str
    edit_button: str
    delete_button: str
    total_expenses_button: str
    total_income_button: str
    yes_button: str
    no_button: str
    transaction_title_prompt: str
    title_prompts: dict[TransactionType, str]
    new_title_prompts: dict[TransactionType, str]
    invalid_title: str
    choose_category: str
    choose_category_with_buttons: str
    value_prompt: str
    invalid_value: str
    confirm_save_header: str
    confirm_with_buttons: str
    saved_headers: dict[TransactionType, str]
    confirm_delete_header: str
    confirm_delete_with_buttons: str
    deleted_header: str
    operation_cancelled: str
    transaction_cancelled: str
    deletion_cancelled: str
    invalid_id: str
    no_transactions_found: str
    no_transactions_to_edit: str
    no_transactions_to_delete: str
    edit_id_prompt: str
    delete_id_prompt: str
    total_expenses: str
    total_income: str
    session_expired: str
    save_failed: str
    delete_failed: str
    transaction_missing: str
    type_names: dict[TransactionType, str]
    category_names: dict[Category, str]
    cancel_keywords: frozenset[str] = CANCEL_KEYWORDS


ENGLISH = Labels(
    main_menu_prompt="WHAT WOULD YOU LIKE TO DO?",
    add_income_button="➕ ADD INCOME",
    add_expense_button="➖ ADD EXPENSE",
    last_button="📋 LAST 10 TRANSACTIONS",
    edit_button="✏️ EDIT TRANSACTION",
    delete_button="🗑️ DELETE TRANSACTION",
    total_expenses_button="💸 TOTAL EXPENSES",
    total_income_button="💰 TOTAL INCOME",
    yes_button="✅ YES",
    no_button="❌ NO",
    transaction_title_prompt="WHAT IS THE TRANSACTION TITLE?",
    title_prompts={
        TransactionType.INCOME: "WHAT IS THE INCOME TITLE?",
        TransactionType.EXPENSE: "WHAT IS THE EXPENSE TITLE?",
    },
    new_title_prompts={
        TransactionType.INCOME: "WHAT IS THE NEW INCOME TITLE?",
        TransactionType.EXPENSE: "WHAT IS THE NEW EXPENSE TITLE?",
    },
    invalid_title="INVALID TITLE. USE BETWEEN 4 AND 32 CHARACTERS.",
    choose_category="CHOOSE THE CATEGORY:",
    choose_category_with_buttons="PLEASE CHOOSE A CATEGORY USING THE BUTTONS:",
    value_prompt="WHAT IS THE {type} VALUE? (EX: 5900 FOR R$ 59.00)",
    invalid_value="INVALID VALUE. MINIMUM R$ 1.00. EX: 5900 FOR R$ 59.00",
    confirm_save_header="CONFIRM SAVING THIS TRANSACTION?",
    confirm_with_buttons="PLEASE USE THE BUTTONS TO CONFIRM OR CANCEL:",
    saved_headers={
        TransactionType.INCOME: "✅ INCOME SAVED SUCCESSFULLY!",
        TransactionType.EXPENSE: "✅ EXPENSE SAVED SUCCESSFULLY!",
    },
    confirm_delete_header="CONFIRM TRANSACTION DELETION:",
    confirm_delete_with_buttons="PLEASE USE THE BUTTONS TO CONFIRM OR CANCEL THE DELETION:",
    deleted_header="🗑️ TRANSACTION DELETED SUCCESSFULLY!",
    operation_cancelled="❌ OPERATION CANCELLED.",
    transaction_cancelled="❌ TRANSACTION CANCELLED.",
    deletion_cancelled="❌ DELETION CANCELLED.",
    invalid_id="INVALID ID. TRY AGAIN.",
    no_transactions_found="NO TRANSACTIONS FOUND.",
    no_transactions_to_edit="NO TRANSACTIONS TO EDIT.",
    no_transactions_to_delete="NO TRANSACTIONS TO DELETE.",
    edit_id_prompt="ENTER THE ID OF THE TRANSACTION YOU WANT TO EDIT:\n\n{listing}",
    delete_id_prompt="ENTER THE ID OF THE TRANSACTION YOU WANT TO DELETE:\n\n{listing}",
    total_expenses="💸 TOTAL EXPENSES: {total} in {count} transactions",
    total_income="💰 TOTAL INCOME: {total} in {count} transactions",
    session_expired="THIS SESSION HAS EXPIRED. PLEASE START AGAIN.",
    save_failed="COULD NOT SAVE THE TRANSACTION. PRESS YES TO TRY AGAIN OR NO TO CANCEL.",
    delete_failed="COULD NOT DELETE THE TRANSACTION. PRESS YES TO TRY AGAIN OR NO TO CANCEL.",
    transaction_missing="THIS TRANSACTION NO LONGER EXISTS.",
    type_names={
        TransactionType.INCOME: "INCOME",
        TransactionType.EXPENSE: "EXPENSE",
    },
    category_names={
        IncomeCategory.SALARY: "SALARY",
        IncomeCategory.INVESTMENTS: "INVESTMENTS",
        IncomeCategory.SALES: "SALES",
        IncomeCategory.PRIZES: "PRIZES",
        ExpenseCategory.HEALTH: "HEALTH",
        ExpenseCategory.FOOD: "FOOD",
        ExpenseCategory.EDUCATION: "EDUCATION",
        ExpenseCategory.ENTERTAINMENT: "ENTERTAINMENT",
        ExpenseCategory.SERVICES: "SERVICES",
        ExpenseCategory.GIFTS_AND_DONATIONS: "GIFTS AND DONATIONS",
        ExpenseCategory.TRANSPORTATION: "TRANSPORTATION",
        ExpenseCategory.SHOPPING: "SHOPPING",
    },
)

PORTUGUESE = Labels(
    main_menu_prompt="O QUE VOCÊ GOSTARIA DE FAZER?",
    add_income_button="➕ ADICIONAR RECEITA",
    add_expense_button="➖ ADICIONAR DESPESA",
    last_button="📋 ÚLTIMAS 10 TRANSAÇÕES",
    edit_button="✏️ EDITAR TRANSAÇÃO",
    delete_button="🗑️ DELETAR TRANSAÇÃO",
    total_expenses_button="💸 TOTAL DESPESAS",
    total_income_button="💰 TOTAL RECEITAS",
    yes_button="✅ SIM",
    no_button="❌ NÃO",
    transaction_title_prompt="QUAL O TÍTULO DA TRANSAÇÃO?",
    title_prompts={
        TransactionType.INCOME: "QUAL O TÍTULO DA RECEITA?",
        TransactionType.EXPENSE: "QUAL O TÍTULO DA DESPESA?",
    },
    new_title_prompts={
        TransactionType.INCOME: "QUAL O NOVO TÍTULO DA RECEITA?",
        TransactionType.EXPENSE: "QUAL O NOVO TÍTULO DA DESPESA?",
    },
    invalid_title="TÍTULO INVÁLIDO. USE ENTRE 4 E 32 CARACTERES.",
    choose_category="ESCOLHA A CATEGORIA:",
    choose_category_with_buttons="POR FAVOR, ESCOLHA UMA CATEGORIA USANDO OS BOTÕES:",
    value_prompt="QUAL O VALOR DA {type}? (EX: 5900 PARA R$ 59,00)",
    invalid_value="VALOR INVÁLIDO. MÍNIMO R$ 1,00. EX: 5900 PARA R$ 59,00",
    confirm_save_header="CONFIRMA SALVAR ESTA TRANSAÇÃO?",
    confirm_with_buttons="POR FAVOR, USE OS BOTÕES PARA CONFIRMAR OU CANCELAR:",
    saved_headers={
        TransactionType.INCOME: "✅ RECEITA SALVA COM SUCESSO!",
        TransactionType.EXPENSE: "✅ DESPESA SALVA COM SUCESSO!",
    },
    confirm_delete_header="CONFIRMAR EXCLUSÃO DA TRANSAÇÃO:",
    confirm_delete_with_buttons="POR FAVOR, USE OS BOTÕES PARA CONFIRMAR OU CANCELAR A EXCLUSÃO:",
    deleted_header="🗑️ TRANSAÇÃO DELETADA COM SUCESSO!",
    operation_cancelled="❌ OPERAÇÃO CANCELADA.",
    transaction_cancelled="❌ TRANSAÇÃO CANCELADA.",
    deletion_cancelled="❌ EXCLUSÃO CANCELADA.",
    invalid_id="ID INVÁLIDO. TENTE NOVAMENTE.",
    no_transactions_found="NENHUMA TRANSAÇÃO ENCONTRADA.",
    no_transactions_to_edit="NENHUMA TRANSAÇÃO PARA EDITAR.",
    no_transactions_to_delete="NENHUMA TRANSAÇÃO PARA DELETAR.",
    edit_id_prompt="DIGITE O ID DA TRANSAÇÃO QUE DESEJA EDITAR:\n\n{listing}",
    delete_id_prompt="DIGITE O ID DA TRANSAÇÃO QUE DESEJA DELETAR:\n\n{listing}",
    total_expenses="💸 TOTAL DE DESPESAS: {total} em {count} transações",
    total_income="💰 TOTAL DE RECEITAS: {total} em {count} transações",
    session_expired="ESTA SESSÃO EXPIROU. POR FAVOR, COMECE NOVAMENTE.",
    save_failed="NÃO FOI POSSÍVEL SALVAR A TRANSAÇÃO. TOQUE EM SIM PARA TENTAR DE NOVO OU NÃO PARA CANCELAR.",
    delete_failed="NÃO FOI POSSÍVEL DELETAR A TRANSAÇÃO. TOQUE EM SIM PARA TENTAR DE NOVO OU NÃO PARA CANCELAR.",
    transaction_missing="ESTA TRANSAÇÃO NÃO EXISTE MAIS.",
    type_names={
        TransactionType.INCOME: "RECEITA",
        TransactionType.EXPENSE: "DESPESA",
    },
    category_names={
        IncomeCategory.SALARY: "SALÁRIO",
        IncomeCategory.INVESTMENTS: "INVESTIMENTOS",
        IncomeCategory.SALES: "VENDAS",
        IncomeCategory.PRIZES: "PRÊMIOS",
        ExpenseCategory.HEALTH: "SAÚDE",
        ExpenseCategory.FOOD: "ALIMENTAÇÃO",
        ExpenseCategory.EDUCATION: "EDUCAÇÃO",
        ExpenseCategory.ENTERTAINMENT: "ENTRETENIMENTO",
        ExpenseCategory.SERVICES: "SERVIÇOS",
        ExpenseCategory.GIFTS_AND_DONATIONS: "PRESENTES E DOAÇÕES",
        ExpenseCategory.TRANSPORTATION: "TRANSPORTE",
        ExpenseCategory.SHOPPING: "COMPRAS",
    },
)

LABELS: dict[str, Labels] = {
    "en": ENGLISH,
    "pt_BR": PORTUGUESE,
}


def get_labels(locale: str) -> Labels:
    try:
        return LABELS[locale]
    except KeyError as exc:
        raise ValueError(f"Unsupported locale '{locale}'. Choose one of: {', '.join(LABELS)}.") from exc
